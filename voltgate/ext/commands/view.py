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

from .errors import (
    DisallowedEscape,
    ExpectedClosingQuoteError,
    InvalidEndOfQuotedStringError,
    UnexpectedQuoteError,
)

# map from opening quotes to closing quotes
_quotes: dict[str, str] = {
    '"': '"',
    "'": "'",
    '‘': '’',
    '“': '”',
    '„': '‟',
    '「': '」',
    '『': '』',
    '«': '»',
    '‹': '›',
}

# apostrophes are literal inside unquoted words
_all_quotes: frozenset[str] = frozenset((set(_quotes.keys()) | set(_quotes.values())) - {"'"})


class StringView:
    """A cursor over command arguments.

    Attributes
    ----------
    buffer: :class:`str`
        The text being scanned.
    end: :class:`int`
        The length of buffer.
    index: :class:`int`
        The position of next unread character.
    previous: :class:`int`
        The position before last ``get_*()`` or ``read_*()`` call.
    """

    __slots__ = (
        'buffer',
        'end',
        'index',
        'previous',
    )

    def __init__(self, buffer: str, /) -> None:
        self.buffer: str = buffer
        self.end: int = len(buffer)
        self.index: int = 0
        self.previous: int = 0

    def __repr__(self) -> str:
        return f'<StringView pos={self.index} prev={self.previous} end={self.end} eof={self.eof}>'

    @property
    def current(self) -> str | None:
        """Optional[:class:`str`]: Returns the character at current position."""
        return None if self.eof else self.buffer[self.index]

    @property
    def eof(self) -> bool:
        return self.index >= self.end

    def undo(self) -> None:
        """Undo the previous ``get_*()`` or ``read_*()`` operation."""
        self.index = self.previous

    def skip_ws(self) -> bool:
        """Skips whitespace.

        Returns
        -------
        :class:`bool`
            Whether the buffer had whitespace and was skipped.
        """
        pos = self.index
        while pos < self.end and self.buffer[pos].isspace():
            pos += 1

        self.previous = self.index
        self.index = pos
        return self.previous != self.index

    def skip_string(self, string: str, /) -> bool:
        """Skips a substring, if buffer continues with it."""
        if self.buffer.startswith(string, self.index):
            self.previous = self.index
            self.index += len(string)
            return True
        return False

    def get(self) -> str | None:
        """Optional[:class:`str`]: Read 1 char from buffer."""
        if self.eof:
            return None
        self.previous = self.index
        self.index += 1
        return self.buffer[self.previous]

    def read_rest(self) -> str:
        """:class:`str`: Read the rest of buffer."""
        result = self.buffer[self.index :]
        self.previous = self.index
        self.index = self.end
        return result

    def get_word(self) -> str:
        """:class:`str`: Reads a word until whitespace is reached."""
        pos = self.index
        while pos < self.end and not self.buffer[pos].isspace():
            pos += 1

        self.previous = self.index
        result = self.buffer[self.index : pos]
        self.index = pos
        return result

    def get_quoted_word(self, *, disallow_newlines: bool = False) -> str | None:
        """Reads a word until whitespace is reached, unless the word is quoted.

        A backslash escapes the quote marks, itself and a newline.
        Any other backslash is kept as is.

        Parameters
        ----------
        disallow_newlines: :class:`bool`
            Whether to reject escaped newlines.

        Raises
        ------
        DisallowedEscape
            An escaped newline was found while ``disallow_newlines`` is ``True``.
        UnexpectedQuoteError
            A quote mark was found inside non-quoted word.
        ExpectedClosingQuoteError
            The quoted word never ends.
        InvalidEndOfQuotedStringError
            The closing quote is followed by something other than whitespace.

        Returns
        -------
        Optional[:class:`str`]
            The word, or ``None`` if the buffer was exhausted.
        """
        if self.eof:
            return None

        start = self.index
        buffer = self.buffer
        close_quote = _quotes.get(buffer[start])
        if close_quote is None:
            escapable = _all_quotes
            pos = start
        else:
            escapable = frozenset((buffer[start], close_quote))
            pos = start + 1

        result = []
        while pos < self.end:
            current = buffer[pos]
            pos += 1

            if current == '\\':
                if pos >= self.end:
                    if close_quote is not None:
                        raise ExpectedClosingQuoteError(close_quote=close_quote)
                    result.append(current)
                    break

                following = buffer[pos]
                if following == '\n':
                    if disallow_newlines:
                        raise DisallowedEscape(which='newlines')
                    result.append(following)
                    pos += 1
                elif following == '\\' or following in escapable:
                    result.append(following)
                    pos += 1
                else:
                    result.append(current)
                continue

            if close_quote is not None:
                if current == close_quote:
                    if pos < self.end and not buffer[pos].isspace():
                        raise InvalidEndOfQuotedStringError(received=buffer[pos])
                    self.previous = start
                    self.index = pos
                    return ''.join(result)
            elif current.isspace():
                pos -= 1
                break
            elif current in _all_quotes:
                raise UnexpectedQuoteError(quote=current)

            result.append(current)
        else:
            if close_quote is not None:
                raise ExpectedClosingQuoteError(close_quote=close_quote)

        self.previous = start
        self.index = pos
        return ''.join(result)


__all__ = ('StringView',)
