#!/usr/bin/env python
# coding=utf-8
################################################################################
#
# Description: Describe the structure of a generation pattern
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

import argparse
import logging
import os
import sys

from .core import (
    DEFAULT_REPEAT_CAP,
    UNBOUNDED,
    Alternation,
    CharClass,
    Concat,
    Literal,
    Pattern,
    Quantified,
)
from .error import PatternException

LOG = logging.getLogger("linter")


def _summary(node, repeat_cap):
    if isinstance(node, Literal):
        return "Literal %r" % node.char
    if isinstance(node, CharClass):
        return "CharClass %s (%d member%s%s)" % (
            node,
            len(node.alphabet),
            "" if len(node.alphabet) == 1 else "s",
            ", negated" if node.negated else "",
        )
    if isinstance(node, Concat):
        return "Concat (%d children)" % len(node.children)
    if isinstance(node, Alternation):
        return "Alternation (%d branches)" % len(node.branches)
    if isinstance(node, Quantified):
        return "Quantified [%d,%s] up to %d, %s" % (
            node.min_,
            "inf" if node.max_ is UNBOUNDED else node.max_,
            node.high(repeat_cap),
            "uniform" if node.distribution is None else repr(node.distribution),
        )
    return type(node).__name__


def describe(pattern, repeat_cap=DEFAULT_REPEAT_CAP):
    """Return the pattern tree as a list of lines, one node per line,
    indented by depth."""
    lines = []
    togo = [(pattern.root, 0)]
    while togo:
        node, depth = togo.pop()
        lines.append("  " * depth + _summary(node, repeat_cap))
        togo.extend((child, depth + 1) for child in reversed(node.subnodes()))
    return lines


def unbounded_repeats(pattern):
    """Quantified nodes whose count is cut at the repeat cap."""
    togo = [pattern.root]
    while togo:
        node = togo.pop()
        if (
            isinstance(node, Quantified)
            and node.max_ is UNBOUNDED
            and (node.distribution is None or node.distribution.upper is None)
        ):
            yield node
        togo.extend(reversed(node.subnodes()))


def main(argv=None):

    logging.basicConfig(level=logging.INFO)
    if bool(os.getenv("DEBUG")):
        logging.getLogger().setLevel(logging.DEBUG)

    argp = argparse.ArgumentParser(description="Describe the structure of a pattern")
    argp.add_argument("pattern", help="Pattern to describe")
    argp.add_argument(
        "-c",
        "--repeat-cap",
        type=int,
        default=DEFAULT_REPEAT_CAP,
        help="Repetitions used in place of an unbounded maximum",
    )
    args = argp.parse_args(argv)

    try:
        pattern = Pattern(args.pattern)
    except PatternException as exc:
        LOG.error("%s", exc)
        return 1

    if pattern.anchored_start or pattern.anchored_end:
        LOG.info(
            "anchored at %s",
            " and ".join(
                name
                for (name, flag) in (
                    ("start", pattern.anchored_start),
                    ("end", pattern.anchored_end),
                )
                if flag
            ),
        )
    for line in describe(pattern, args.repeat_cap):
        LOG.info("%s", line)
    for node in unbounded_repeats(pattern):
        LOG.warning(
            "%s is unbounded, generation stops at %d repetitions",
            node,
            node.high(args.repeat_cap),
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
