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

import inspect
import numbers

__all__ = ("PatternException", "GenerationError", "ParseError", "ValidationError")


class PatternException(Exception):
    """Base class for errors raised while parsing or generating a pattern.

    ``position`` is the 0-based offset into the pattern text of the offending
    construct, or None. When the raising frame has a parse state (``pstate``)
    or generation state (``gstate``) in scope, the location is taken from it
    unless given explicitly as the second argument.
    """

    def __init__(self, *args):
        position = None
        if len(args) == 2:
            args, position = (args[0],), args[1]
            if position is not None and not isinstance(position, numbers.Number):
                raise RuntimeError(
                    "Bad argument type to PatternException: %s" % type(position).__name__
                )
        super().__init__(*args)

        raise_locals = inspect.currentframe().f_back.f_locals
        pstate = raise_locals.get("pstate")
        gstate = raise_locals.get("gstate")
        raiser = raise_locals.get("self")
        if pstate is None and gstate is None and raiser is not None:
            type_ = type(raiser).__name__
            if type_ == "_ParseState":
                pstate = raiser
            elif type_ == "_GenState":
                gstate = raiser

        if position is None and pstate is not None:
            position = pstate.pos
        self.position = position
        self.backtrace = gstate.backtrace() if gstate is not None else None

    def __str__(self):
        msg = super().__str__()

        if self.backtrace is not None:
            extra = "(generation backtrace: %s)" % self.backtrace
        elif self.position is not None:
            extra = "(position %d)" % self.position
        else:
            extra = None

        if msg and extra:
            return msg + " " + extra
        if extra:
            return extra
        return msg


class GenerationError(PatternException):
    pass


class ParseError(PatternException):
    pass


class ValidationError(PatternException):
    pass
