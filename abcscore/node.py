# -*- coding: utf-8 -*-
#
# This file is part of `abcscore`, a library for ABC music notation
#
# Copyright © 2019-2022 by Wilbert Berendsen <info@wilbertberendsen.nl>
#
# This module is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This module is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


"""
The :class:`Node` tree type, the base of the score model.

A Node is a Python list of child nodes that also knows its parent. In
:mod:`abcscore.score` a Document holds Parts, a Part holds Measures and a
Measure holds its entries (notes, backups, directions etc.) in the order
they were written.

"""

import itertools
import weakref


DUMP_STYLES = {
    "ascii":   (" | ", "   ", " |-", " `-"),
    "round":   (" │ ", "   ", " ├╴", " ╰╴"),
}


def _no_parent():
    return None


class Node(list):
    """A list of child nodes with a weak reference to the parent node.

    Keep a reference to the top node of a tree (normally the Document), the
    children don't keep their parent alive.

    Nodes compare by identity, so that ``list.index()`` and ``in`` find the
    node itself and not an equal one. Use :meth:`equals` to compare trees by
    value.

    The query operators take a Node class (or a tuple of classes) and return
    an iterator:

    * ``measure / Note``: the children that are a Note
    * ``part // Note``: all descendants that are a Note, in order
    * ``note << Part``: the ancestors that are a Part
    * ``measure ^ Note``: the children that are not a Note

    Given a Node instance instead of a class, the nodes of the same type for
    which :meth:`body_equals` returns True are selected.

    """
    __slots__ = ('__weakref__', '_parent')

    def __init__(self, *children):
        self._parent = _no_parent
        list.__init__(self, children)
        for node in children:
            node._parent = weakref.ref(self)

    def __repr__(self):
        return '<{} ({} {})>'.format(type(self).__name__, len(self),
            "child" if len(self) == 1 else "children")

    def __bool__(self):
        return True

    __hash__ = object.__hash__

    def __eq__(self, other):
        return self is other

    def __ne__(self, other):
        return self is not other

    @property
    def parent(self):
        """The parent Node, or None."""
        return self._parent()

    @parent.setter
    def parent(self, node):
        self._parent = _no_parent if node is None else weakref.ref(node)

    def _adopt(self, nodes):
        for node in nodes:
            node._parent = weakref.ref(self)

    def append(self, node):
        self._adopt((node,))
        list.append(self, node)

    def extend(self, nodes):
        nodes = list(nodes)
        self._adopt(nodes)
        list.extend(self, nodes)

    def insert(self, index, node):
        self._adopt((node,))
        list.insert(self, index, node)

    def __setitem__(self, k, new):
        if isinstance(k, slice):
            new = list(new)
            self._adopt(new)
        else:
            self._adopt((new,))
        list.__setitem__(self, k, new)

    def _select(self, what, nodes, invert=False):
        if isinstance(what, Node):
            predicate = lambda node: type(node) is type(what) and node.body_equals(what)
        elif isinstance(what, (tuple, type)):
            predicate = lambda node: isinstance(node, what)
        else:
            return NotImplemented
        return (itertools.filterfalse if invert else filter)(predicate, nodes)

    def __truediv__(self, what):
        return self._select(what, self)

    def __floordiv__(self, what):
        return self._select(what, self.descendants())

    def __lshift__(self, what):
        return self._select(what, self.ancestors())

    def __xor__(self, what):
        return self._select(what, self, True)

    def ancestors(self):
        """Yield the parent, its parent, and so on."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def descendants(self):
        """Yield all nodes below this one, depth first, in order."""
        for node in self:
            yield node
            if len(node):
                yield from node.descendants()

    def is_last(self):
        """Return True if we are the last child of our parent."""
        return self.parent[-1] is self

    def equals(self, other):
        """Return True if other is a tree of the same shape and values.

        Both nodes must have the same type, :meth:`body_equals` must return
        True and all children must be equal as well.

        """
        return type(self) is type(other) and len(self) == len(other) \
            and self.body_equals(other) \
            and all(a.equals(b) for a, b in zip(self, other))

    def body_equals(self, other):
        """Return True if our own values equal those of other (not the children).

        Always True here; the score classes compare their fields.

        """
        return True

    def dump(self, file=None, style="round", depth=0):
        """Print the tree to file (default stdout), for debugging."""
        d = DUMP_STYLES[style]
        prefix = []
        node = self
        for level in range(depth):
            last = node.is_last()
            prefix.append(d[(0 if level else 2) + int(last)])
            node = node.parent
        print(''.join(reversed(prefix)) + repr(self), file=file)
        for child in self:
            child.dump(file, style, depth + 1)
