# coding=utf-8
# pylint: disable=missing-docstring
################################################################################
#
# Description: Probability distributions for repeat counts and class members
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

import bisect
import logging
import math
import numbers

from .error import ValidationError

__all__ = (
    "Annotation",
    "Bernoulli",
    "Binomial",
    "Categorical",
    "Constant",
    "Distribution",
    "Geometric",
    "KINDS",
    "Zipf",
    "resolve",
)


LOG = logging.getLogger("pregex")


class Annotation(object):
    """A distribution annotation as written in a pattern, before validation.

    ::

        ~Name
        ~Name(0.5, 3)
        ~Name(p=0.5, n=3)
        ~Name(a=0.5, .=0.1)

    ``positional`` holds the bare numbers in order, ``named`` the
    ``(key, value)`` pairs in order. ``position`` is where the ``~`` sits in
    the pattern text.
    """

    def __init__(self, name, positional=(), named=(), position=None):
        self.name = name
        self.positional = tuple(positional)
        self.named = tuple(named)
        self.position = position

    def __repr__(self):
        return "Annotation(%r, %r, %r, %r)" % (
            self.name,
            self.positional,
            self.named,
            self.position,
        )


def _check_number(name, value):
    if (
        isinstance(value, bool)
        or not isinstance(value, numbers.Real)
        or not math.isfinite(value)
    ):
        raise ValidationError("%s must be a finite number, got %r" % (name, value))
    return float(value)


def _check_probability(name, value, exclusive=False):
    value = _check_number(name, value)
    if exclusive:
        if not 0.0 < value < 1.0:
            raise ValidationError("%s must be in (0,1), got %r" % (name, value))
    elif not 0.0 <= value <= 1.0:
        raise ValidationError("%s must be in [0,1], got %r" % (name, value))
    return value


def _check_integer(name, value, minimum):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError("%s must be an integer, got %r" % (name, value))
    if value < minimum:
        raise ValidationError("%s must be >= %d, got %d" % (name, minimum, value))
    return int(value)


def _fmt(value):
    if isinstance(value, float):
        return repr(value)
    return "%d" % value


def _fill_slots(slots, annotation):
    """Assign annotation parameters to named slots.

    Positional values fill the slots left to right, then named values are
    applied by key. Assigning a slot twice is an error.
    """
    if len(annotation.positional) > len(slots):
        raise ValidationError(
            "expects at most %d parameter%s, got %d"
            % (len(slots), "" if len(slots) == 1 else "s", len(annotation.positional))
        )
    values = dict(zip(slots, annotation.positional))
    for key, value in annotation.named:
        if key not in slots:
            raise ValidationError(
                "unknown parameter '%s' (expecting one of: %s)" % (key, ", ".join(slots))
            )
        if key in values:
            raise ValidationError("parameter '%s' is given more than once" % key)
        values[key] = value
    return values


class Distribution(object):
    """Base of the closed set of distributions in ``KINDS``.

    Subclasses define ``name`` (as written after ``~``), ``SLOTS`` (parameter
    keys in positional order) and ``sample(rnd)``, which draws an integer
    using only the given random source. ``SUPPORT_MIN`` is the smallest value
    ``sample`` can return and ``upper`` the largest, or None when the support
    is unbounded.
    """

    name = None
    SLOTS = ()
    SUPPORT_MIN = 0

    @property
    def upper(self):
        return None

    def params(self):
        return tuple(getattr(self, slot) for slot in self.SLOTS)

    def sample(self, rnd):
        raise NotImplementedError("%s.sample" % type(self).__name__)

    @classmethod
    def resolve(cls, annotation, count, alphabet):
        return cls._from_values(_fill_slots(cls.SLOTS, annotation), count, alphabet)

    @classmethod
    def _from_values(cls, values, count, alphabet):
        raise NotImplementedError("%s._from_values" % cls.__name__)

    def __eq__(self, other):
        if not isinstance(other, Distribution):
            return NotImplemented
        return type(self) is type(other) and self.params() == other.params()

    def __hash__(self):
        return hash((type(self).__name__, self.params()))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(repr(p) for p in self.params()))

    def __str__(self):
        return "~%s(%s)" % (self.name, ",".join(_fmt(p) for p in self.params()))


class Constant(Distribution):
    """Always ``v``.

    ::

        a{3~Const}        (exactly 3, same as a{3})
        a{0~Const(5)}     (exactly 5)
        [abc~Const(1)]    (always 'b')

    ``v`` defaults to the repeat count, or to the first member in a class.
    """

    name = "Const"
    SLOTS = ("v",)

    def __init__(self, v):
        self.v = _check_integer("v", v, 0)

    @property
    def upper(self):
        return self.v

    def sample(self, rnd):
        return self.v

    @classmethod
    def _from_values(cls, values, count, alphabet):
        if alphabet is None:
            return cls(values.get("v", count))
        result = cls(values.get("v", 0))
        if result.v >= len(alphabet):
            raise ValidationError(
                "v=%d is out of range for a class of %d members" % (result.v, len(alphabet))
            )
        return result


class Bernoulli(Distribution):
    """1 with probability ``p``, otherwise 0. ``p`` defaults to 1.0.

    ::

        a{1~Ber(0.3)}     ('a' 30% of the time, '' otherwise)
    """

    name = "Ber"
    SLOTS = ("p",)

    def __init__(self, p=1.0):
        self.p = _check_probability("p", p)

    @property
    def upper(self):
        return 1

    def sample(self, rnd):
        return 1 if rnd.random() < self.p else 0

    @classmethod
    def _from_values(cls, values, count, alphabet):
        return cls(values.get("p", 1.0))


class Binomial(Distribution):
    """Number of successes in ``n`` independent trials of probability ``p``.

    ::

        a{4~Bin(0.5)}     (0 to 4 'a's, 2 most likely)
        a{0~Bin(0.5,10)}  (0 to 10 'a's)

    ``p`` defaults to 1.0, ``n`` to the repeat count, or to one less than the
    number of members in a class (so every member is reachable).
    """

    name = "Bin"
    SLOTS = ("p", "n")

    def __init__(self, p, n):
        self.p = _check_probability("p", p)
        self.n = _check_integer("n", n, 0)

    @property
    def upper(self):
        return self.n

    def sample(self, rnd):
        return sum(1 for _ in range(self.n) if rnd.random() < self.p)

    @classmethod
    def _from_values(cls, values, count, alphabet):
        default_n = count if alphabet is None else len(alphabet) - 1
        return cls(values.get("p", 1.0), values.get("n", default_n))


class Categorical(Distribution):
    """Index ``i`` with probability ``weights[i] / sum(weights)``.

    ::

        a{0~Cat(0.2,0.5,0.3)}     (0, 1 or 2 'a's)
        a{0~Cat(3=0.5,.=0.5)}     (3 'a's half the time, 0 to 2 otherwise)
        [abc~Cat(0.8,0.1,0.1)]    (mostly 'a')
        [abc~Cat(c=0.5)]          ('c' half the time, 'a' and 'b' share the rest)

    Weights need not sum to 1. Bare weights are taken in order. Named weights
    are keyed by class member, or by a single digit naming a repeat count.
    The key ``.`` sets the weight shared evenly by every outcome without an
    explicit weight; without it, those outcomes share what is left of 1.0.
    """

    name = "Cat"

    def __init__(self, weights):
        weights = tuple(weights)
        if not weights:
            raise ValidationError("expects at least one weight")
        self.weights = tuple(
            _check_number("weight %d" % i, w) for (i, w) in enumerate(weights)
        )
        if any(w < 0.0 for w in self.weights):
            raise ValidationError("weights must be >= 0, got %r" % (self.weights,))
        self._cumulative = []
        total = 0.0
        for weight in self.weights:
            total += weight
            self._cumulative.append(total)
        if total <= 0.0:
            raise ValidationError("Invalid total weight: %r" % total)
        self._last = max(i for (i, w) in enumerate(self.weights) if w > 0.0)

    def params(self):
        return self.weights

    @property
    def upper(self):
        return self._last

    def sample(self, rnd):
        target = rnd.random() * self._cumulative[-1]
        idx = bisect.bisect_right(self._cumulative, target)
        # float rounding can land exactly on the total
        return min(idx, self._last)

    @classmethod
    def resolve(cls, annotation, count, alphabet):
        if alphabet is not None and len(annotation.positional) > len(alphabet):
            raise ValidationError(
                "%d weights given for a class of %d members"
                % (len(annotation.positional), len(alphabet))
            )
        explicit = dict(enumerate(annotation.positional))
        remainder = None
        for key, value in annotation.named:
            if key == ".":
                if remainder is not None:
                    raise ValidationError("parameter '.' is given more than once")
                remainder = _check_number("weight '.'", value)
                continue
            if alphabet is not None:
                if key not in alphabet:
                    raise ValidationError("'%s' is not a member of the class" % key)
                idx = alphabet.index(key)
            else:
                if not key.isdigit():
                    raise ValidationError(
                        "weights are keyed by repeat count (0-9), got '%s'" % key
                    )
                idx = int(key)
            if idx in explicit:
                raise ValidationError("weight for '%s' is given more than once" % key)
            explicit[idx] = _check_number("weight '%s'" % key, value)

        if alphabet is not None:
            size = len(alphabet)
        else:
            size = max(explicit) + 1 if explicit else 0
        unfilled = [i for i in range(size) if i not in explicit]
        share = 0.0
        if unfilled:
            if remainder is None:
                remainder = max(0.0, 1.0 - sum(explicit.values()))
            share = remainder / len(unfilled)
        return cls(explicit.get(i, share) for i in range(size))


class Geometric(Distribution):
    """Number of failures before the first success, each trial succeeding
    with probability ``p`` (support starts at 0). ``p`` defaults to 0.5.

    ::

        a{0~Geo(0.2)}     (mean of 4 'a's)

    The support is unbounded, so samples are cut at the generator's repeat
    cap.
    """

    name = "Geo"
    SLOTS = ("p",)

    def __init__(self, p=0.5):
        self.p = _check_probability("p", p, exclusive=True)

    def sample(self, rnd):
        return int(math.log(1.0 - rnd.random()) / math.log1p(-self.p))

    @classmethod
    def _from_values(cls, values, count, alphabet):
        return cls(values.get("p", 0.5))


class Zipf(Distribution):
    """Rank in ``1..n`` with probability proportional to ``rank ** -s``.

    ::

        a{5~Zipf}         (1 to 5 'a's, 1 most likely)
        [abcd~Zipf(2)]    ('a' most likely, 'd' least)

    ``s`` defaults to 1.0, ``n`` to the repeat count or the number of members
    in a class. In a class, rank 1 is the first member.
    """

    name = "Zipf"
    SLOTS = ("s", "n")
    SUPPORT_MIN = 1

    def __init__(self, s, n):
        self.s = _check_number("s", s)
        if self.s <= 0.0:
            raise ValidationError("s must be > 0, got %r" % self.s)
        self.n = _check_integer("n", n, 1)
        self._cumulative = []
        total = 0.0
        for rank in range(1, self.n + 1):
            total += rank ** -self.s
            self._cumulative.append(total)

    @property
    def upper(self):
        return self.n

    def sample(self, rnd):
        target = rnd.random() * self._cumulative[-1]
        return min(bisect.bisect_right(self._cumulative, target), self.n - 1) + 1

    @classmethod
    def _from_values(cls, values, count, alphabet):
        default_n = count if alphabet is None else len(alphabet)
        return cls(values.get("s", 1.0), values.get("n", default_n))


KINDS = {
    "ber": Bernoulli,
    "bin": Binomial,
    "cat": Categorical,
    "const": Constant,
    "geo": Geometric,
    "zipf": Zipf,
}


def resolve(annotation, count=None, alphabet=None):
    """Validate an annotation and build its distribution.

    ``count`` is the repeat count written before the annotation (``{n~...}``)
    and ``alphabet`` the ordered members of an annotated class; exactly one
    is given. Raises ValidationError located at the annotation.
    """
    try:
        kind = KINDS[annotation.name.lower()]
    except KeyError:
        raise ValidationError(
            "Unknown distribution: %s (expecting one of: %s)"
            % (annotation.name, ", ".join(k.name for k in KINDS.values())),
            annotation.position,
        ) from None
    try:
        result = kind.resolve(annotation, count, alphabet)
    except ValidationError as err:
        raise ValidationError(
            "Invalid parameters for ~%s: %s" % (kind.name, err.args[0]),
            annotation.position,
        ) from err
    LOG.debug("resolved %r -> %r", annotation, result)
    return result
