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
Meta-information about the abcscore package.

This information is used by the install script.

"""

name = "abcscore"
version = (0, 1, 0)
description = "Read and write ABC music notation as a structured score"
long_description = (
    "abcscore parses ABC music notation into a tree of parts, measures "
    "and timed entries, and writes such a tree back to ABC, either by "
    "reconstructing the notation or by replaying the original text.")
maintainer = "Wilbert Berendsen"
maintainer_email = "info@wilbertberendsen.nl"
license = "GPL v3"

version_string = "{}.{}.{}".format(*version)
