################################################################################
# coding=utf-8
# pylint: disable=invalid-name,missing-docstring
#
# Description: Pattern describe tool tests
#
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

import unittest

from pregex.core import Pattern
from pregex.lint import describe, main, unbounded_repeats


class Describe(unittest.TestCase):
    def test_0(self):
        """test the tree is listed depth first and indented"""
        lines = describe(Pattern("ab|[xy]{2,}"), repeat_cap=8)
        self.assertEqual(
            lines,
            [
                "Alternation (2 branches)",
                "  Concat (2 children)",
                "    Literal 'a'",
                "    Literal 'b'",
                "  Quantified [2,inf] up to 8, uniform",
                "    CharClass [xy] (2 members)",
            ],
        )

    def test_1(self):
        """test distributions are described"""
        lines = describe(Pattern("a{3~Bin(0.5)}[^a]"))
        self.assertEqual(lines[1], "  Quantified [0,inf] up to 3, Binomial(0.5, 3)")
        self.assertEqual(lines[3], "  CharClass [^a] (94 members, negated)")

    def test_2(self):
        """test only repeats cut at the cap are reported"""
        pat = Pattern("a*b{2,}c{3~Geo}d{3~Zipf}e{1,5}")
        self.assertEqual(
            [str(node) for node in unbounded_repeats(pat)],
            ["a*", "b{2,}", "c{0,~Geo(0.5)}"],
        )

    def test_3(self):
        """test the command line"""
        with self.assertLogs("linter", level="WARNING") as logs:
            self.assertEqual(main(["x(ab)+"]), 0)
        self.assertEqual(len(logs.records), 1)
        self.assertIn("(ab)+ is unbounded", logs.output[0])
        with self.assertLogs("linter", level="ERROR"):
            self.assertEqual(main(["x(ab"]), 1)


if __name__ == "__main__":
    unittest.main()
