#!/usr/bin/env python
# coding=utf-8
# pylint: disable=missing-docstring,too-many-lines
################################################################################
#
# Description: Pattern based random string generation
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
import io
import logging
import os
import os.path
import random
import re
import string
import sys

from .distribution import Annotation, resolve
from .error import GenerationError, ParseError, PatternException, ValidationError
from .splist import SparseList

__all__ = (
    "Alternation",
    "CharClass",
    "Concat",
    "DEFAULT_ALPHABET",
    "DEFAULT_LIMIT",
    "DEFAULT_REPEAT_CAP",
    "GenerationError",
    "Literal",
    "ParseError",
    "Pattern",
    "PatternException",
    "Quantified",
    "UNBOUNDED",
    "ValidationError",
    "Wildcard",
    "generate",
    "main",
    "parse",
)


# repetitions generated in place of an unbounded maximum (*, +, {n,}, ~Geo)
DEFAULT_REPEAT_CAP = 32
# output length (characters) after which every repeat generates its minimum
DEFAULT_LIMIT = 100 * 1024
# printable ASCII, used by '.' and negated classes
DEFAULT_ALPHABET = ((0x20, 0x7E),)
UNBOUNDED = None

RESERVED = "^$|()\\.+?*{}[]~,="
CLASS_RESERVED = "[]\\~.^"
ESCAPES = {
    "0": "\0",
    "t": "\t",
    "n": "\n",
    "v": "\v",
    "f": "\f",
    "r": "\r",
    "e": "\x1b",
}
_UNESCAPES = {char: letter for (letter, char) in ESCAPES.items()}

_SPACE = " \t\n\r\x0c\x0b"
SHORTHANDS = {
    "d": string.digits,
    "s": _SPACE,
    "w": string.ascii_letters + string.digits + "_",
}
POSIX_CLASSES = {
    "alnum": string.ascii_letters + string.digits,
    "alpha": string.ascii_letters,
    "blank": " \t",
    "cntrl": "".join(chr(c) for c in range(0x20)) + "\x7f",
    "digit": string.digits,
    "graph": "".join(chr(c) for c in range(0x21, 0x7F)),
    "lower": string.ascii_lowercase,
    "print": "".join(chr(c) for c in range(0x20, 0x7F)),
    "punct": string.punctuation,
    "space": _SPACE,
    "upper": string.ascii_uppercase,
    "word": SHORTHANDS["w"],
    "xdigit": string.hexdigits,
}

_UNWIND = ("unwind",)


LOG = logging.getLogger("pregex")
LOG.setLevel(logging.INFO)


def _make_alphabet(alphabet):
    if alphabet is None:
        return SparseList(DEFAULT_ALPHABET)
    if isinstance(alphabet, SparseList):
        return SparseList(alphabet)
    if isinstance(alphabet, str):
        alphabet = [(ord(char), ord(char)) for char in alphabet]
    result = SparseList()
    for a, b in alphabet:
        result |= SparseList([(a, b)])
    return result


def _escape(char, reserved):
    if char in _UNESCAPES:
        return "\\" + _UNESCAPES[char]
    if char in reserved:
        return "\\" + char
    return char


def _number(text):
    if re.fullmatch(r"[-+]?\d+", text):
        return int(text)
    return float(text)


class _GenState(object):
    def __init__(self, rnd, alphabet, repeat_cap, limit):
        self.rnd = rnd
        self.alphabet = alphabet
        self.repeat_cap = repeat_cap
        self.limit = limit
        self.symstack = []
        self.path = []
        self.output = []
        self.length = 0

    def append(self, value):
        self.output.append(value)
        self.length += len(value)

    def choose(self, alphabet):
        if not len(alphabet):
            raise GenerationError("Can't choose a character from an empty alphabet")
        value = alphabet[self.rnd.randrange(len(alphabet))]
        return chr(value) if isinstance(value, int) else value

    def is_limit_exceeded(self):
        return self.limit is not None and self.length >= self.limit

    def backtrace(self):
        names = []
        for node in self.path:
            text = str(node)
            if len(text) > 20:
                text = text[:17] + "..."
            names.append("%s %r" % (type(node).__name__, text))
        return ", ".join(names)


class _ParseState(object):
    _RE_TOKEN = re.compile(
        r"""(?P<group>\()
            |(?P<set>\[\^?)
            |\\(?P<short>[wsd])
            |\\(?P<esc>.)
            |(?P<dot>\.)
            |(?P<stop>[|)$])
            |(?P<repeat>[+?*{])
            |(?P<reserved>[\^}\]~,=\\])
            |(?P<literal>.)""",
        re.VERBOSE | re.DOTALL,
    )
    _RE_DIST_NAME = re.compile(r"~(?P<name>[A-Za-z]+)")
    _RE_PARAM = re.compile(
        r"""\s*(?:(?P<key>\\.|[^\s,()=\\])\s*=\s*)?
            (?P<value>[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)\s*""",
        re.VERBOSE | re.DOTALL,
    )

    def __init__(self, text, alphabet):
        self.text = text
        self.pos = 0
        self.alphabet = alphabet

    def peek(self):
        return self.text[self.pos : self.pos + 1]

    def at_end(self):
        return self.pos >= len(self.text)

    def parse(self):
        anchored_start = anchored_end = False
        if self.peek() == "^":
            anchored_start = True
            self.pos += 1
        root = Alternation.parse(self)
        if self.peek() == "$":
            if self.pos + 1 != len(self.text):
                raise ParseError("'$' is only allowed at the end of the pattern")
            anchored_end = True
            self.pos += 1
        if not self.at_end():
            raise ParseError("Unmatched ')'")
        return root, anchored_start, anchored_end

    def match_token(self):
        """Match the token at the current position.

        Returns None at the end of an expression (``|``, ``)``, ``$`` or end
        of text).
        """
        match = self._RE_TOKEN.match(self.text, self.pos)
        if match is None or match.group("stop"):
            return None
        return match

    def parse_token(self, match):
        """Build the node for a token other than ``(``, without its repeat."""
        start = self.pos
        if match.group("repeat"):
            raise ParseError(
                "Nothing to repeat for '%s' (dangling quantifier)" % match.group("repeat")
            )
        if match.group("reserved"):
            char = match.group("reserved")
            if char == "\\":
                raise ParseError("Dangling escape at end of pattern")
            if char == "^":
                raise ParseError("'^' is only allowed at the start of the pattern")
            if char in "]}":
                raise ParseError("Unmatched '%s'" % char)
            raise ParseError("Unexpected '%s', escape it to use it as a literal" % char)
        if match.group("set"):
            node = CharClass.parse(self, match.group("set"))
        else:
            self.pos = match.end()
            if match.group("short"):
                node = CharClass([("shorthand", match.group("short"))], alphabet=self.alphabet)
            elif match.group("esc"):
                node = Literal(ESCAPES.get(match.group("esc"), match.group("esc")))
            elif match.group("dot"):
                node = Wildcard()
            else:
                node = Literal(match.group("literal"))
        LOG.debug("parsed %r at %d", node, start)
        return node

    def parse_annotation(self):
        """Parse ``~Name`` or ``~Name(params)``. Values are checked later, by
        ``distribution.resolve``."""
        start = self.pos
        name = self._RE_DIST_NAME.match(self.text, self.pos)
        if name is None:
            raise ParseError("Expected distribution name after '~'", start + 1)
        self.pos = name.end()
        positional, named = [], []
        if self.peek() == "(":
            paren = self.pos
            self.pos += 1
            while True:
                param = self._RE_PARAM.match(self.text, self.pos)
                if param is None:
                    if self.at_end():
                        raise ParseError("Unmatched '('", paren)
                    raise ParseError("Expected distribution parameter")
                value = _number(param.group("value"))
                if param.group("key") is None:
                    positional.append(value)
                else:
                    named.append((param.group("key")[-1], value))
                self.pos = param.end()
                char = self.peek()
                if char == ")":
                    self.pos += 1
                    break
                if char != ",":
                    if not char:
                        raise ParseError("Unmatched '('", paren)
                    raise ParseError("Expected ',' or ')' after distribution parameter")
                self.pos += 1
        return Annotation(name.group("name"), positional, named, start)


class _Node(object):
    """Base of the pattern tree. Nodes are immutable once built."""

    def __setattr__(self, name, value):
        if name in self.__dict__:
            raise AttributeError("%s is immutable" % type(self).__name__)
        object.__setattr__(self, name, value)

    def subnodes(self):
        return ()

    def generate(self, gstate):
        raise GenerationError("Can't generate node of type %s" % type(self).__name__)

    def _key(self):
        raise NotImplementedError("%s._key" % type(self).__name__)

    def __eq__(self, other):
        if not isinstance(other, _Node):
            return NotImplemented
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__, self._key()))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(repr(k) for k in self._key()))


def _wrap(node, types):
    if isinstance(node, types):
        return "(%s)" % node
    return str(node)


class Literal(_Node):
    """A single character, generated verbatim.

    ::

        abc         (three literals)
        \\.          (a literal '.', any character can be escaped)
        \\n          (line feed, also \\0 \\t \\v \\f \\r \\e)

    Every character other than ``^ $ | ( ) . \\ + ? * { } [ ] ~ , =`` is a
    literal, including space and hyphen.
    """

    def __init__(self, char):
        self.char = char

    def generate(self, gstate):
        gstate.append(self.char)

    def _key(self):
        return (self.char,)

    def __str__(self):
        return _escape(self.char, RESERVED)


class Wildcard(_Node):
    """``.`` generates one character drawn uniformly from the pattern's
    alphabet (printable ASCII unless given otherwise)."""

    def generate(self, gstate):
        gstate.append(gstate.choose(gstate.alphabet))

    def _key(self):
        return ()

    def __str__(self):
        return "."


class CharClass(_Node):
    """Set of characters, one of which is generated.

    ::

        \\d \\s \\w                    (digits, whitespace, word characters)
        [abc]                       (one of 'a', 'b' or 'c')
        [^abc]                      (any character of the alphabet except those)
        [[:digit:]_.]               (posix class, literal and '.' members)
        [abc~Cat(a=0.5)]            ('a' half the time)
        [abcd~Zipf(1.5)]            (earlier members more likely)

    Members are single characters (escapes work as outside a class), the
    shorthand classes ``\\d \\s \\w``, posix classes ``[:name:]`` and ``.``
    which adds the whole alphabet. ``-`` is a literal, there are no ranges.
    Inside a class only ``[ ] \\ ~ .`` and a leading ``^`` are special.

    ``alphabet`` holds the resolved characters: in order of first appearance,
    or in code point order when the class is negated or has a ``.`` member.
    Without a distribution each is equally likely; a distribution picks the
    member by index (Zipf by rank, starting at the first member).
    """

    _RE_MEMBER = re.compile(
        r"""\[:(?P<posix>[A-Za-z]+):\]
            |\\(?P<short>[wsd])
            |\\(?P<esc>.)
            |(?P<dot>\.)
            |(?P<dist>~)
            |(?P<end>\])
            |(?P<bad>[\[\\])
            |(?P<literal>.)""",
        re.VERBOSE | re.DOTALL,
    )

    def __init__(self, members, negated=False, distribution=None, alphabet=None):
        self.members = tuple(tuple(member) for member in members)
        self.negated = bool(negated)
        self.distribution = distribution
        self.alphabet = CharClass.expand(self.members, self.negated, _make_alphabet(alphabet))

    @staticmethod
    def expand(members, negated, universe):
        """Resolve class members to an ordered string of characters."""
        chars, seen, any_char = [], set(), False
        for kind, value in members:
            if kind == "any":
                any_char = True
                continue
            if kind == "literal":
                expansion = value
            elif kind == "shorthand":
                expansion = SHORTHANDS[value]
            else:
                expansion = POSIX_CLASSES[value]
            for char in expansion:
                if char not in seen:
                    seen.add(char)
                    chars.append(char)
        if not (negated or any_char):
            return "".join(chars)
        result = SparseList(universe)
        if negated:
            if any_char:
                result.clear()
            for char in chars:
                result.remove(ord(char))
        else:
            for char in chars:
                result |= SparseList([(ord(char), ord(char))])
        return "".join(chr(c) for c in result)

    def generate(self, gstate):
        if not self.alphabet:
            raise GenerationError("Character class %s has no members" % self)
        if self.distribution is None:
            idx = gstate.rnd.randrange(len(self.alphabet))
        else:
            idx = self.distribution.sample(gstate.rnd) - self.distribution.SUPPORT_MIN
            idx = min(max(idx, 0), len(self.alphabet) - 1)
        gstate.append(self.alphabet[idx])

    def _key(self):
        return (self.members, self.negated, self.distribution, self.alphabet)

    def __repr__(self):
        return "CharClass(%r, %r, %r)" % (self.members, self.negated, self.distribution)

    def __str__(self):
        if (
            len(self.members) == 1
            and self.members[0][0] == "shorthand"
            and not self.negated
            and self.distribution is None
        ):
            return "\\" + self.members[0][1]
        parts = ["[^" if self.negated else "["]
        for kind, value in self.members:
            if kind == "literal":
                parts.append(_escape(value, CLASS_RESERVED))
            elif kind == "shorthand":
                parts.append("\\" + value)
            elif kind == "posix":
                parts.append("[:%s:]" % value)
            else:
                parts.append(".")
        if self.distribution is not None:
            parts.append(str(self.distribution))
        parts.append("]")
        return "".join(parts)

    @staticmethod
    def parse(pstate, opener):
        start = pstate.pos
        negated = opener == "[^"
        pstate.pos += len(opener)
        members = []
        annotation = None
        while True:
            match = CharClass._RE_MEMBER.match(pstate.text, pstate.pos)
            if match is None:
                raise ParseError("Unmatched '['", start)
            if match.group("end") or match.group("dist"):
                if not members:
                    raise ParseError("Empty character class", start)
                if match.group("end"):
                    pstate.pos = match.end()
                    break
                annotation = pstate.parse_annotation()
                if pstate.peek() != "]":
                    if pstate.at_end():
                        raise ParseError("Unmatched '['", start)
                    raise ParseError("Expected ']' after class distribution")
                pstate.pos += 1
                break
            if match.group("bad"):
                if match.group("bad") == "\\":
                    raise ParseError("Dangling escape at end of pattern")
                raise ParseError("Unexpected '[' in character class, escape it as '\\['")
            if match.group("posix"):
                if match.group("posix") not in POSIX_CLASSES:
                    raise ValidationError("Unknown posix class: %s" % match.group("posix"))
                members.append(("posix", match.group("posix")))
            elif match.group("short"):
                members.append(("shorthand", match.group("short")))
            elif match.group("esc"):
                members.append(
                    ("literal", ESCAPES.get(match.group("esc"), match.group("esc")))
                )
            elif match.group("dot"):
                members.append(("any", None))
            else:
                members.append(("literal", match.group("literal")))
            pstate.pos = match.end()

        alphabet = CharClass.expand(members, negated, pstate.alphabet)
        if not alphabet:
            raise ValidationError("Character class matches no characters", start)
        distribution = None
        if annotation is not None:
            distribution = resolve(annotation, alphabet=alphabet)
        return CharClass(members, negated, distribution, pstate.alphabet)


class Concat(_Node):
    """Concatenation: children generated in order.

    ::

        abc
        a(bc)d      (same as abcd, groups only set precedence)
    """

    def __init__(self, children):
        self.children = tuple(children)

    def subnodes(self):
        return self.children

    def generate(self, gstate):
        if len(self.children) < 2:
            raise GenerationError(
                "Concatenation needs at least 2 children, got %d" % len(self.children)
            )
        gstate.symstack.extend(reversed(self.children))

    def _key(self):
        return (self.children,)

    def __str__(self):
        return "".join(_wrap(child, (Alternation, Concat)) for child in self.children)

    @staticmethod
    def append(factors, node):
        if isinstance(node, Concat):
            # an unrepeated group splices into the enclosing run
            factors.extend(node.children)
        else:
            factors.append(node)

    @staticmethod
    def join(factors):
        if len(factors) == 1:
            return factors[0]
        return Concat(factors)


class Alternation(_Node):
    """Choose one branch, each with equal probability.

    ::

        cat|dog|bird
        a(b|c)d         ('abd' or 'acd')

    A parenthesized alternation inside another stays a single branch, so
    ``a|(b|c)`` gives 'a' half the time.
    """

    def __init__(self, branches):
        self.branches = tuple(branches)

    def subnodes(self):
        return self.branches

    def generate(self, gstate):
        if len(self.branches) < 2:
            raise GenerationError(
                "Alternation needs at least 2 branches, got %d" % len(self.branches)
            )
        gstate.symstack.append(self.branches[gstate.rnd.randrange(len(self.branches))])

    def _key(self):
        return (self.branches,)

    def __str__(self):
        return "|".join(_wrap(branch, Alternation) for branch in self.branches)

    @staticmethod
    def parse(pstate):
        """Parse alternatives up to the end of the pattern, ``$`` or an
        unmatched ``)``.

        Groups are parsed with an explicit stack of the enclosing expressions,
        so nesting depth is not bound by the recursion limit.
        """
        groups = []  # (position of '(', branches, factors) of enclosing levels
        branches, factors = [], []
        while True:
            match = pstate.match_token()
            if match is not None:
                if match.group("group"):
                    groups.append((pstate.pos, branches, factors))
                    branches, factors = [], []
                    pstate.pos = match.end()
                    continue
                node = pstate.parse_token(match)
                Concat.append(factors, Quantified.parse(pstate, node))
                continue

            if not factors:
                if branches or pstate.peek() == "|":
                    raise ParseError("Empty alternative")
                raise ParseError("Expected expression")
            branches.append(Concat.join(factors))
            factors = []
            if pstate.peek() == "|":
                pstate.pos += 1
                continue
            node = branches[0] if len(branches) == 1 else Alternation(branches)
            if not groups:
                return node

            if pstate.peek() != ")":
                if pstate.peek() == "$":
                    raise ParseError("'$' is only allowed at the end of the pattern")
                raise ParseError("Unmatched '('", groups[-1][0])
            pstate.pos += 1
            _, branches, factors = groups.pop()
            Concat.append(factors, Quantified.parse(pstate, node))


class Quantified(_Node):
    """Repeat a token or group a random number of times.

    ::

        a+          (1 or more)
        a?          (0 or 1)
        a*          (0 or more)
        a{3}        (exactly 3)
        a{2,5}      (2 to 5)
        a{2,}       (2 or more)
        a{3~Geo(0.2)}       (count drawn from the distribution)
        a{2,5~Bin(0.5,8)}   (count drawn, then clamped to 2..5)

    Without a distribution the count is uniform between the bounds. With one
    after a single count ``{n~...}`` the distribution alone decides the count
    (``n`` only supplies default parameters); after a range the sample is
    clamped into it. An unbounded maximum is replaced by the generator's
    repeat cap unless the distribution's support is bounded.
    """

    _RE_REPEAT = re.compile(r"(?P<short>[+?*])|\{(?:(?P<a>\d+)(?P<range>,(?P<b>\d+)?)?)?")
    _SHORT = {"+": (1, UNBOUNDED), "?": (0, 1), "*": (0, UNBOUNDED)}

    def __init__(self, child, min_, max_, distribution=None):
        self.child = child
        self.min_ = min_
        self.max_ = max_
        self.distribution = distribution

    def subnodes(self):
        return (self.child,)

    def high(self, repeat_cap):
        """Largest count this repeat can generate."""
        if self.max_ is not UNBOUNDED:
            return self.max_
        if self.distribution is not None and self.distribution.upper is not None:
            return max(self.min_, self.distribution.upper)
        return max(self.min_, repeat_cap)

    def generate(self, gstate):
        if self.min_ < 0 or (self.max_ is not UNBOUNDED and self.min_ > self.max_):
            raise GenerationError(
                "Invalid range for repeat: [%d,%s]"
                % (self.min_, "inf" if self.max_ is UNBOUNDED else self.max_)
            )
        high = self.high(gstate.repeat_cap)
        if gstate.is_limit_exceeded():
            reps = self.min_
        elif self.distribution is not None:
            reps = min(max(self.distribution.sample(gstate.rnd), self.min_), high)
        else:
            reps = gstate.rnd.randint(self.min_, high)
        LOG.debug("%s repeats %d times", self, reps)
        gstate.symstack.extend(reps * (self.child,))

    def _key(self):
        return (self.child, self.min_, self.max_, self.distribution)

    def _repeat_text(self):
        if self.distribution is None:
            if (self.min_, self.max_) == (1, UNBOUNDED):
                return "+"
            if (self.min_, self.max_) == (0, 1):
                return "?"
            if (self.min_, self.max_) == (0, UNBOUNDED):
                return "*"
            if self.min_ == self.max_:
                return "{%d}" % self.min_
        if self.max_ is UNBOUNDED:
            bounds = "%d," % self.min_
        else:
            bounds = "%d,%d" % (self.min_, self.max_)
        return "{%s%s}" % (bounds, self.distribution or "")

    def __str__(self):
        return _wrap(self.child, (Alternation, Concat, Quantified)) + self._repeat_text()

    @staticmethod
    def parse(pstate, node):
        start = pstate.pos
        match = Quantified._RE_REPEAT.match(pstate.text, pstate.pos)
        if match is None:
            return node
        pstate.pos = match.end()
        if match.group("short"):
            min_, max_ = Quantified._SHORT[match.group("short")]
            return Quantified(node, min_, max_)
        if match.group("a") is None:
            raise ParseError("Expected repeat count after '{'")
        count = int(match.group("a"))
        min_ = max_ = count
        if match.group("range"):
            max_ = UNBOUNDED if match.group("b") is None else int(match.group("b"))
            if max_ is not UNBOUNDED and min_ > max_:
                raise ValidationError(
                    "Invalid range for repeat: {%d,%d}" % (min_, max_), start
                )
        annotation = None
        if pstate.peek() == "~":
            annotation = pstate.parse_annotation()
        if pstate.peek() != "}":
            if pstate.at_end():
                raise ParseError("Unmatched '{'", start)
            raise ParseError("Expected '}' to close repeat")
        pstate.pos += 1
        distribution = None
        if annotation is not None:
            distribution = resolve(annotation, count=count)
            if not match.group("range"):
                min_, max_ = 0, UNBOUNDED
        return Quantified(node, min_, max_, distribution)


class Pattern(object):
    """Generate strings conforming to a pattern.

    A Pattern is parsed once from text in a regular expression dialect and
    then used to generate any number of random strings matching it. Unlike a
    regular expression, repeat counts and character choices can follow
    explicit probability distributions::

        id-\\d{4}
        (GET|POST) /[[:alnum:]]{1,12}
        a{3~Geo(0.2)}[xyz~Cat(x=0.8)]

    Precedence from loosest to tightest is alternation (``|``), concatenation
    and repetition. Parentheses group for precedence only; there are no
    capture groups, backreferences or lookaround. A leading ``^`` and trailing
    ``$`` are accepted and recorded (``anchored_start``, ``anchored_end``)
    but generate nothing.

    A distribution annotation is ``~Name`` optionally followed by
    parameters, ``~Name(0.5)`` or ``~Name(p=0.5)``, placed after the count in
    ``{...}`` or at the end of a ``[...]`` class. Names are ``Const``,
    ``Ber``, ``Bin``, ``Cat``, ``Geo`` and ``Zipf``, in any case (see
    ``pregex.distribution``). Bare parameters fill the distribution's
    parameters in order, then named parameters are applied; giving one
    twice is an error.

    ``alphabet`` sets the characters used by ``.`` and negated classes: a
    string of characters, an iterable of ``(first, last)`` code point ranges,
    or a SparseList. The default is printable ASCII.

    Raises ParseError for malformed text and ValidationError for bad
    distribution parameters, both with the offending position.
    """

    def __init__(self, pattern, alphabet=None):
        if hasattr(pattern, "read"):
            pattern = pattern.read()
        if isinstance(pattern, bytes):
            pattern = pattern.decode("utf-8")
        self.text = pattern
        self.alphabet = _make_alphabet(alphabet)
        LOG.debug("parsing pattern %r", pattern)
        pstate = _ParseState(pattern, self.alphabet)
        try:
            self.root, self.anchored_start, self.anchored_end = pstate.parse()
        except (ParseError, ValidationError):
            raise
        except Exception as err:
            raise ParseError("%s: %s" % (type(err).__name__, str(err)))

    @classmethod
    def from_node(cls, root, anchored_start=False, anchored_end=False, alphabet=None):
        """Wrap an already built tree."""
        result = cls.__new__(cls)
        result.text = None
        result.alphabet = _make_alphabet(alphabet)
        result.root = root
        result.anchored_start = anchored_start
        result.anchored_end = anchored_end
        return result

    def generate(self, rnd=None, repeat_cap=DEFAULT_REPEAT_CAP, limit=DEFAULT_LIMIT):
        if rnd is None:
            rnd = random.Random()
        return generate(self, rnd, repeat_cap=repeat_cap, limit=limit)

    def __eq__(self, other):
        if not isinstance(other, Pattern):
            return NotImplemented
        return (self.root, self.anchored_start, self.anchored_end, self.alphabet) == (
            other.root,
            other.anchored_start,
            other.anchored_end,
            other.alphabet,
        )

    __hash__ = None

    def __str__(self):
        return "%s%s%s" % (
            "^" if self.anchored_start else "",
            self.root,
            "$" if self.anchored_end else "",
        )

    def __repr__(self):
        return "Pattern(%r)" % str(self)


def parse(text, alphabet=None):
    return Pattern(text, alphabet=alphabet)


def generate(pattern, rnd, repeat_cap=DEFAULT_REPEAT_CAP, limit=DEFAULT_LIMIT):
    """Generate one string from ``pattern`` using ``rnd`` (a random.Random).

    Identically seeded ``rnd`` give identical output. ``repeat_cap`` replaces
    an unbounded repeat maximum. Once the output reaches ``limit`` characters
    every remaining repeat generates its minimum count; None disables this.
    """
    if isinstance(repeat_cap, bool) or not isinstance(repeat_cap, int) or repeat_cap < 0:
        raise ValueError("repeat_cap must be a non-negative integer, got %r" % (repeat_cap,))
    gstate = _GenState(rnd, pattern.alphabet, repeat_cap, limit)
    gstate.symstack.append(pattern.root)
    while gstate.symstack:
        this = gstate.symstack.pop()
        if this is _UNWIND:
            gstate.path.pop()
            continue
        gstate.symstack.append(_UNWIND)
        gstate.path.append(this)
        try:
            this.generate(gstate)
        except GenerationError:
            raise
        except Exception as err:
            raise GenerationError("%s: %s" % (type(err).__name__, str(err)))
    return "".join(gstate.output)


def main(argv=None):

    logging.basicConfig(level=logging.INFO)
    if bool(os.getenv("DEBUG")):
        logging.getLogger().setLevel(logging.DEBUG)
        LOG.setLevel(logging.DEBUG)

    class _SafeFileType(argparse.FileType):
        def __call__(self, string_):
            if string_ == "-":
                return argparse.FileType.__call__(self, string_)
            if "w" in self._mode and os.path.isfile(string_):
                raise argparse.ArgumentTypeError(
                    "output file exists, not overwriting: %s" % string_
                )
            try:
                return io.open(string_, mode=self._mode, encoding="utf-8")
            except IOError as exc:
                raise argparse.ArgumentTypeError("can't open '%s': %s" % (string_, exc))

    argp = argparse.ArgumentParser(description="Generate random strings from a pattern")
    argp.add_argument("pattern", help="Pattern to generate from")
    argp.add_argument(
        "output",
        type=_SafeFileType("w"),
        nargs="?",
        default=sys.stdout,
        help="Output file, one string per line",
    )
    argp.add_argument(
        "-n", "--count", type=int, default=1, help="Number of strings to generate"
    )
    argp.add_argument(
        "-s",
        "--seed",
        type=int,
        help="Seed for the random source (default: random, and logged)",
    )
    argp.add_argument(
        "-c",
        "--repeat-cap",
        type=int,
        default=DEFAULT_REPEAT_CAP,
        help="Repetitions used in place of an unbounded maximum",
    )
    argp.add_argument(
        "-l",
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help="Set a generation limit (roughly, 0 to disable)",
    )
    args = argp.parse_args(argv)
    if args.count < 0:
        argp.error("argument -n/--count: must not be negative")
    if args.repeat_cap < 0:
        argp.error("argument -c/--repeat-cap: must not be negative")

    try:
        pattern = Pattern(args.pattern)
    except PatternException as exc:
        if args.output is not sys.stdout:
            # created by _SafeFileType, which never opens an existing file
            args.output.close()
            os.unlink(args.output.name)
        argp.exit(1, "%s: error: %s\n" % (argp.prog, exc))

    seed = args.seed
    if seed is None:
        seed = random.SystemRandom().randrange(2 ** 32)
    LOG.info("using seed %d", seed)
    rnd = random.Random(seed)
    limit = args.limit if args.limit > 0 else None
    for _ in range(args.count):
        args.output.write(pattern.generate(rnd, repeat_cap=args.repeat_cap, limit=limit))
        args.output.write("\n")
    if args.output is not sys.stdout:
        args.output.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
