# coding=utf-8
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
"""Random string generation from regex-like patterns with distribution
annotations."""

from .core import (
    DEFAULT_ALPHABET,
    DEFAULT_LIMIT,
    DEFAULT_REPEAT_CAP,
    UNBOUNDED,
    Alternation,
    CharClass,
    Concat,
    Literal,
    Pattern,
    Quantified,
    Wildcard,
    generate,
    main,
    parse,
)
from .error import GenerationError, ParseError, PatternException, ValidationError

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
