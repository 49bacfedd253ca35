# coding=utf-8
# pylint: disable=missing-docstring
################################################################################
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.
################################################################################

import bisect

__all__ = ("SparseList",)


class SparseList(object):
    """Sorted set of code points stored as inclusive ranges.

    Supports indexing into the flattened sequence without materializing it,
    which is how a character is drawn uniformly from a large alphabet.
    ``add`` refuses overlapping ranges (raises ValueError); use ``|=`` to
    merge sets that may overlap.

    ``SparseList(other)`` copies another SparseList; ``SparseList(ranges)``
    builds one from an iterable of ``(a, b)`` pairs.
    """

    def __init__(self, ranges=None):
        self.clear()
        if isinstance(ranges, SparseList):
            self._data = [list(pair) for pair in ranges._data]
            self._len = ranges._len
        elif ranges is not None:
            for a, b in ranges:
                self.add(a, b)

    def add(self, a, b=None):
        """
        Add range (a,b) inclusive. If b is not specified, default to (a,a).
        """
        if b is None:
            b = a
        elif b < a:
            raise ValueError("Only forward intervals are supported (a <= b)")
        insert = bisect.bisect_left(self._data, [a])
        if insert and a <= self._data[insert - 1][1]:
            raise ValueError("%d is already present in the list" % a)
        if insert < len(self._data) and b >= self._data[insert][0]:
            raise ValueError("%d is already present in the list" % b)
        # coalesce with neighbours that touch the new range
        joins_prev = insert and a == self._data[insert - 1][1] + 1
        joins_next = insert < len(self._data) and b + 1 == self._data[insert][0]
        if joins_prev and joins_next:
            self._data[insert - 1][1] = self._data.pop(insert)[1]
        elif joins_prev:
            self._data[insert - 1][1] = b
        elif joins_next:
            self._data[insert][0] = a
        else:
            self._data.insert(insert, [a, b])
        self._len += b - a + 1

    def remove(self, a, b=None):
        """
        Remove range (a,b) inclusive. If b is not specified, default to (a,a).
        Parts of (a,b) that are not present are ignored.
        """
        if b is None:
            b = a
        elif b < a:
            raise ValueError("Only forward intervals are supported (a <= b)")
        kept = []
        for lo, hi in self._data:
            if hi < a or lo > b:
                kept.append([lo, hi])
                continue
            if lo < a:
                kept.append([lo, a - 1])
            if hi > b:
                kept.append([b + 1, hi])
        self._data = kept
        self._len = sum(hi - lo + 1 for (lo, hi) in kept)

    def clear(self):
        self._len = 0
        self._data = []

    def ranges(self):
        return [tuple(pair) for pair in self._data]

    def __ior__(self, other):
        for (a, b) in other._data:
            self.remove(a, b)
            self.add(a, b)
        return self

    def __isub__(self, other):
        for (a, b) in other._data:
            self.remove(a, b)
        return self

    def __contains__(self, value):
        idx = bisect.bisect_right(self._data, [value, float("inf")])
        return bool(idx) and self._data[idx - 1][0] <= value <= self._data[idx - 1][1]

    def __eq__(self, other):
        if not isinstance(other, SparseList):
            return NotImplemented
        return self._data == other._data

    def __iter__(self):
        for a, b in self._data:
            for value in range(a, b + 1):
                yield value

    def __len__(self):
        return self._len

    def __getitem__(self, key):
        if key < 0:
            key += self._len
        if not 0 <= key < self._len:
            raise IndexError("SparseList index out of range")
        for a, b in self._data:
            len_ = b - a + 1
            if key < len_:
                return a + key
            key -= len_
        raise IndexError("SparseList index out of range")

    def __repr__(self):
        return "SparseList(%r)" % self.ranges()
