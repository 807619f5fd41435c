"""Mixins endowing openfir's kernels and containers with echo & print
representations.

This module contains the following classes:

**ViewInstance:**
Echoes an instance as a call of its class with its current arguments.

**ViewContainer:**
Echoes a container as its class name and an abbreviated dict of its
public attributes & properties.
"""

import inspect
import pprint
import reprlib


def _abbreviator():
    """Returns a Repr instance that abbreviates long arrays & dicts."""

    r = reprlib.Repr()
    r.maxdict = 3
    r.maxlist = 6
    r.maxother = 60
    return r


class _Viewable:
    """Shared gathering & pretty printing of public state."""

    __slots__ = ()

    def _public_state(self):
        """Returns a dict of the non-protected attributes and properties
        of this instance."""

        state = {name: value for name, value in vars(self).items()
                 if not name.startswith('_')}

        props = inspect.getmembers(type(self),
                                   lambda item: isinstance(item, property))
        state.update({name: getattr(self, name) for name, _ in props
                      if not name.startswith('_')})
        return state

    def __str__(self):
        """Returns a pretty printed summary of this instance's state."""

        cls_name = type(self).__name__
        printer = pprint.PrettyPrinter(sort_dicts=False, compact=True)
        return '\n'.join([cls_name + ' Object',
                          '---Attributes & Properties---',
                          printer.pformat(self._public_state()),
                          'Type help({}) for full documentation'.format(
                              cls_name)])


class ViewInstance(_Viewable):
    """Mixin endowing filter kernels with echo and print representations.

    The echo is the call of the inheritor's __init__ with each parameter's
    current value abbreviated. Parameters that are not stored as
    same-named attributes are elided.
    """

    __slots__ = ()

    def __repr__(self):
        r = _abbreviator()
        state = vars(self)
        params = inspect.signature(self.__init__).parameters
        args = ['{}={}'.format(name, r.repr(state[name]))
                for name in params if name in state]
        return '{}({})'.format(type(self).__name__, ', '.join(args))


class ViewContainer(_Viewable):
    """Mixin endowing sample containers with echo and print
    representations."""

    __slots__ = ()

    def __repr__(self):
        state = _abbreviator().repr(self._public_state())
        return '{}: {}'.format(type(self).__name__, state)
