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
Test the node module and comparing score trees.
"""

import io

### find abcscore
import sys
sys.path.insert(0, '.')

from abcscore.node import Node
from abcscore.pitch import Pitch
from abcscore.score import Backup, Document, Measure, Note, Part


class N1(Node):
    pass


class N2(Node):
    pass


class N3(Node):
    pass


class M1(N1):
    pass


class M2(N2):
    pass


class M3(N3):
    pass


def make_tree():
    return \
    N1(
        N2(
            N3(),
            M3(),
            N2(),
            M1(),
        ),
        N1(
            M2(),
        ),
    )


tree = make_tree()


def test_main():
    assert next(tree//M3) is tree[0][1]
    assert len(list(tree/N2)) == 1
    assert sum(1 for _ in tree//N2) == 3     # M2 inherits from N2 :-)
    assert next(tree[1][0] << N1) is tree[1]
    assert list(tree[0] ^ N3) == [tree[0][2], tree[0][3]]
    assert tree[0][1].parent is tree[0]
    assert list(tree[1][0].ancestors()) == [tree[1], tree]
    assert tree[0][3].is_last()
    assert not tree[0][0].is_last()
    assert [type(n) for n in tree.descendants()] == [N2, N3, M3, N2, M1, N1, M2]

    n = N1()
    n.extend(N2() for _ in range(2))
    assert all(c.parent is n for c in n)
    n[0:1] = [N3(), N3()]
    assert [type(c) for c in n] == [N3, N3, N2]
    assert n[1].parent is n
    n.parent = tree
    assert n.parent is tree
    n.parent = None
    assert n.parent is None

    tree2 = make_tree()
    assert tree.equals(tree2)
    tree2[0][3] = N1()
    assert tree2[0][3].parent is tree2[0]
    assert not tree.equals(tree2)

    f = io.StringIO()
    tree.dump(f, 'ascii')
    lines = f.getvalue().splitlines()
    assert lines[0] == '<N1 (2 children)>'
    assert lines[1] == ' |-<N2 (4 children)>'
    assert len(lines) == 8


def test_score():
    m = Measure(Note(Pitch('C', 4), 960))
    n = Note(Pitch('E', 4), 480)
    m.append(n)
    assert n.parent is m
    b = Backup(480)
    m.insert(1, b)
    assert b.parent is m
    assert list(m / Note) == [m[0], n]

    # whitespace is not compared
    n2 = Note(Pitch('C', 4), 960)
    n2.space_before = True
    assert Note(Pitch('C', 4), 960).equals(n2)
    assert not Note(Pitch('C', 4), 960).equals(Note(Pitch('C', 4), 480))
    n3 = Note(Pitch('C', 4), 960)
    n3.ties.append('start')
    assert not n3.equals(Note(Pitch('C', 4), 960))
    assert n3.tie == 'start'

    # the origin is not compared
    d1 = Document(Part(Measure()), title='T')
    d2 = Document(Part(Measure()), title='T', origin=object())
    assert d1.equals(d2)
    assert not d1.equals(Document(Part(Measure()), title='U'))
    assert d1.parts() == [d1[0]]


if __name__ == "__main__" and 'test_main' in globals():
    test_main()
