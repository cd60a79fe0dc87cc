"""
The MIT License (MIT)

Copyright (c) 2024-present MCausc78

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS
OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
DEALINGS IN THE SOFTWARE.
"""

from __future__ import annotations

import typing

from voltgate import VoltgateError


class CommandError(VoltgateError):
    """The base exception type for all command related errors.

    This inherits from :exc:`voltgate.VoltgateError`.
    """

    __slots__ = ()

    def __init__(self, *args: typing.Any, message: str | None = None) -> None:
        if message is not None:
            super().__init__(message, *args)
        else:
            super().__init__(*args)


class UserInputError(CommandError):
    """The base exception type for errors that involve errors
    regarding user input.

    This inherits from :exc:`CommandError`.
    """

    __slots__ = ()


class OptionRequired(UserInputError):
    """Exception raised when parsing a command and an option
    that is required is not encountered.

    Attributes
    ----------
    name: :class:`str`
        The name of option that is missing.
    """

    __slots__ = ('name',)

    def __init__(self, *, name: str) -> None:
        self.name: str = name
        super().__init__(f'option required: {name}')


class BadArgument(UserInputError):
    """Exception raised when a parsing or conversion failure is encountered
    on an argument to pass into a command.

    Attributes
    ----------
    argument: :class:`str`
        The argument that failed to convert.
    """

    __slots__ = ('argument',)

    def __init__(self, *, argument: str, message: str | None = None) -> None:
        self.argument: str = argument
        super().__init__(message=message or f'Converting {argument!r} failed.')


class ArgumentParsingError(UserInputError):
    """An exception raised when the parser fails to parse a user's input.

    This inherits from :exc:`UserInputError`.
    """

    __slots__ = ()


class DisallowedEscape(ArgumentParsingError):
    """An exception raised when the parser encounters an escape sequence the option forbids.

    Attributes
    ----------
    which: :class:`str`
        The kind of escape, for example ``'newlines'``.
    """

    __slots__ = ('which',)

    def __init__(self, *, which: str) -> None:
        self.which: str = which
        super().__init__(f'tried to use {which} escape, but it is disallowed')


class UnexpectedQuoteError(ArgumentParsingError):
    """An exception raised when the parser encounters a quote mark inside a non-quoted string.

    Attributes
    ------------
    quote: :class:`str`
        The quote mark that was found inside the non-quoted string.
    """

    __slots__ = ('quote',)

    def __init__(self, *, quote: str) -> None:
        self.quote: str = quote
        super().__init__(f'Unexpected quote mark, {quote!r}, in non-quoted string')


class InvalidEndOfQuotedStringError(ArgumentParsingError):
    """An exception raised when a space is expected after the closing quote in a string
    but a different character is found.

    Attributes
    -----------
    received: :class:`str`
        The character found instead of the expected string.
    """

    __slots__ = ('received',)

    def __init__(self, *, received: str) -> None:
        self.received: str = received
        super().__init__(f'Expected space after closing quotation but received {received!r}')


class ExpectedClosingQuoteError(ArgumentParsingError):
    """An exception raised when a quote character is expected but not found.

    Attributes
    -----------
    close_quote: :class:`str`
        The quote character expected.
    """

    __slots__ = ('close_quote',)

    def __init__(self, *, close_quote: str) -> None:
        self.close_quote: str = close_quote
        super().__init__(f'Expected closing {close_quote}.')


class CommandRegistrationError(CommandError):
    """An exception raised when the command can't be added
    because the name is already taken by a different command.

    Attributes
    ----------
    name: :class:`str`
        The command name that had the error.
    alias_conflict: :class:`bool`
        Whether the name that conflicts is an alias of the command we try to add.
    """

    __slots__ = ('name', 'alias_conflict')

    def __init__(self, *, name: str, alias_conflict: bool = False) -> None:
        self.name: str = name
        self.alias_conflict: bool = alias_conflict
        type_ = 'alias' if alias_conflict else 'command'
        super().__init__(f'The {type_} {name} is already an existing command or alias.')


class CommandInvokeError(CommandError):
    """Exception raised when the command being invoked raised an exception.

    Attributes
    -----------
    original: :exc:`Exception`
        The original exception that was raised. You can also get this via
        the ``__cause__`` attribute.
    """

    __slots__ = ('original',)

    def __init__(self, *, original: Exception) -> None:
        self.original: Exception = original
        super().__init__(f'Command raised an exception: {original.__class__.__name__}: {original}')


__all__ = (
    'CommandError',
    'UserInputError',
    'OptionRequired',
    'BadArgument',
    'ArgumentParsingError',
    'DisallowedEscape',
    'UnexpectedQuoteError',
    'InvalidEndOfQuotedStringError',
    'ExpectedClosingQuoteError',
    'CommandRegistrationError',
    'CommandInvokeError',
)
