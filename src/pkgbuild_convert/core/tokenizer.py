"""Shell statement tokenizer with quote, escape and bracket tracking."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum, auto


class LexMode(Enum):
    """Quoting context the tokenizer is in."""

    NORMAL = auto()
    # Unquoted '$' just seen; a following "'" opens ANSI-C quoting
    DOLLAR = auto()
    SINGLE_QUOTE = auto()
    DOUBLE_QUOTE = auto()
    ANSI_C_QUOTE = auto()
    ESCAPE = auto()
    # Backslash seen inside a double-quoted region
    DOUBLE_QUOTE_ESCAPE = auto()
    # Backslash seen inside a $'...' region
    ANSI_C_ESCAPE = auto()


class CharClass(Enum):
    """Role of a single character within a statement."""

    LITERAL = auto()
    QUOTE = auto()
    ESCAPE = auto()
    SEPARATOR = auto()


# Modes in which the shell expands '$' and '`'
EXPANDING_MODES = (LexMode.NORMAL, LexMode.DOLLAR, LexMode.DOUBLE_QUOTE)

ANSI_C_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "e": "\x1b",
    "E": "\x1b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
    "?": "?",
}

ANSI_C_ESCAPE_PATTERN = re.compile(
    r"\\(x[0-9A-Fa-f]{1,2}|u[0-9A-Fa-f]{1,4}|U[0-9A-Fa-f]{1,8}|[0-7]{1,3}|c.|.)",
    re.DOTALL,
)


@dataclass(frozen=True)
class TokenizerState:
    """Quoting context plus bracket depth.

    Attributes:
        mode: Current quoting/escaping mode
        bracket_depth: Number of unquoted '(' not yet closed
    """

    mode: LexMode = LexMode.NORMAL
    bracket_depth: int = 0

    @property
    def in_single_quote(self) -> bool:
        return self.mode is LexMode.SINGLE_QUOTE

    @property
    def in_double_quote(self) -> bool:
        return self.mode in (LexMode.DOUBLE_QUOTE, LexMode.DOUBLE_QUOTE_ESCAPE)

    @property
    def in_ansi_c_quote(self) -> bool:
        return self.mode in (LexMode.ANSI_C_QUOTE, LexMode.ANSI_C_ESCAPE)

    @property
    def escape_pending(self) -> bool:
        return self.mode in (LexMode.ESCAPE, LexMode.DOUBLE_QUOTE_ESCAPE, LexMode.ANSI_C_ESCAPE)

    @property
    def in_bracket(self) -> bool:
        return self.bracket_depth > 0

    @property
    def is_open(self) -> bool:
        """Check if text ending in this state needs a continuation line."""
        return self.mode not in (LexMode.NORMAL, LexMode.DOLLAR) or self.in_bracket


INITIAL_STATE = TokenizerState()


def step(state: TokenizerState, char: str) -> tuple[TokenizerState, CharClass]:
    """Advance the tokenizer by one character.

    Args:
        state: State before the character
        char: The character being consumed

    Returns:
        Tuple of (state after the character, role of the character)
    """
    mode = state.mode

    # A pending escape makes exactly one character literal
    if mode is LexMode.ESCAPE:
        return replace(state, mode=LexMode.NORMAL), CharClass.LITERAL
    if mode is LexMode.DOUBLE_QUOTE_ESCAPE:
        return replace(state, mode=LexMode.DOUBLE_QUOTE), CharClass.LITERAL
    if mode is LexMode.ANSI_C_ESCAPE:
        return replace(state, mode=LexMode.ANSI_C_QUOTE), CharClass.LITERAL

    if mode is LexMode.SINGLE_QUOTE:
        if char == "'":
            return replace(state, mode=LexMode.NORMAL), CharClass.QUOTE
        return state, CharClass.LITERAL

    if mode is LexMode.ANSI_C_QUOTE:
        if char == "'":
            return replace(state, mode=LexMode.NORMAL), CharClass.QUOTE
        if char == "\\":
            # Kept in the raw body; decoded when the quote closes
            return replace(state, mode=LexMode.ANSI_C_ESCAPE), CharClass.LITERAL
        return state, CharClass.LITERAL

    if mode is LexMode.DOUBLE_QUOTE:
        if char == '"':
            return replace(state, mode=LexMode.NORMAL), CharClass.QUOTE
        if char == "\\":
            return replace(state, mode=LexMode.DOUBLE_QUOTE_ESCAPE), CharClass.ESCAPE
        return state, CharClass.LITERAL

    if mode is LexMode.DOLLAR:
        if char == "'":
            return replace(state, mode=LexMode.ANSI_C_QUOTE), CharClass.QUOTE
        state = replace(state, mode=LexMode.NORMAL)

    if char == '"':
        return replace(state, mode=LexMode.DOUBLE_QUOTE), CharClass.QUOTE
    if char == "'":
        return replace(state, mode=LexMode.SINGLE_QUOTE), CharClass.QUOTE
    if char == "\\":
        return replace(state, mode=LexMode.ESCAPE), CharClass.ESCAPE
    if char == "$":
        return replace(state, mode=LexMode.DOLLAR), CharClass.LITERAL
    if char == " " and not state.in_bracket:
        return state, CharClass.SEPARATOR
    if char == "(":
        return replace(state, bracket_depth=state.bracket_depth + 1), CharClass.LITERAL
    if char == ")":
        return replace(state, bracket_depth=max(state.bracket_depth - 1, 0)), CharClass.LITERAL

    return state, CharClass.LITERAL


def _escape_bytes(code: str) -> bytes:
    kind = code[0]
    if kind == "x" and len(code) > 1:
        return bytes([int(code[1:], 16)])
    if kind in "uU" and len(code) > 1:
        point = int(code[1:], 16)
        if point > 0x10FFFF or 0xD800 <= point <= 0xDFFF:
            return ("\\" + code).encode()
        return chr(point).encode()
    if kind in "01234567":
        return bytes([int(code, 8) & 0xFF])
    if kind == "c" and len(code) > 1:
        return bytes([ord(code[1]) & 0x1F])
    return ANSI_C_ESCAPES.get(code, "\\" + code).encode()


def decode_ansi_c(body: str) -> str:
    """Decode the text between ``$'`` and ``'``.

    Byte escapes (``\\xHH``, octal) are collected as bytes so that multibyte
    UTF-8 sequences printed by bash come back as characters.

    Examples:
        >>> decode_ansi_c(r"a\\nb\\x41")
        'a\\nbA'
        >>> decode_ansi_c(r"it\\'s")
        "it's"
    """
    out = bytearray()
    pos = 0

    for match in ANSI_C_ESCAPE_PATTERN.finditer(body):
        out += body[pos : match.start()].encode()
        out += _escape_bytes(match.group(1))
        pos = match.end()

    out += body[pos:].encode()
    return out.decode("utf-8", errors="replace")


def _unquoted(previous: LexMode, role: CharClass, char: str) -> str:
    """Return what a character contributes to a token's unquoted value."""
    if role in (CharClass.QUOTE, CharClass.ESCAPE):
        return ""
    if previous is LexMode.ESCAPE:
        # Backslash-newline is a line continuation
        return "" if char == "\n" else char
    if previous is LexMode.DOUBLE_QUOTE_ESCAPE:
        if char == "\n":
            return ""
        return char if char in '$`"\\' else "\\" + char
    return char


@dataclass
class Token:
    """An argument of a shell statement.

    Attributes:
        raw: Token text exactly as written (quotes and backslashes kept)
        value: Token text with shell quoting removed
        start: Start position in the statement text
        end: End position in the statement text (exclusive)
        index: Position of the token within the statement
    """

    raw: str
    value: str
    start: int
    end: int
    index: int = 0


@dataclass
class TokenizeResult:
    """Tokens of a statement and the state its text ended in."""

    tokens: list[Token] = field(default_factory=list)
    state: TokenizerState = INITIAL_STATE

    @property
    def words(self) -> list[str]:
        """Raw text of every token."""
        return [token.raw for token in self.tokens]


class Tokenizer:
    """Splits statement text into tokens, honoring quotes, escapes and brackets."""

    def __init__(
        self,
        text: str,
        max_tokens: int = -1,
        initial: TokenizerState | None = None,
    ) -> None:
        """Initialize the tokenizer.

        Args:
            text: Statement text
            max_tokens: Maximum number of tokens; the last one keeps the
                remainder of the text. Values below 1 mean unbounded.
            initial: State to start from (e.g. the end state of a previous line)
        """
        self.text = text
        self.max_tokens = max_tokens
        self.initial = initial or INITIAL_STATE

    def _at_limit(self, count: int) -> bool:
        return self.max_tokens > 0 and count >= self.max_tokens - 1

    def tokenize(self) -> TokenizeResult:
        """Tokenize the text."""
        tokens: list[Token] = []
        value_parts: list[str] = []
        # Raw body of an open $'...' region
        ansi_body: list[str] | None = [] if self.initial.in_ansi_c_quote else None
        start = 0
        state = self.initial

        for pos, char in enumerate(self.text):
            previous = state.mode
            state, role = step(state, char)

            if role is CharClass.SEPARATOR:
                if self._at_limit(len(tokens)):
                    value_parts.append(char)
                    continue
                tokens.append(self._make_token(start, pos, value_parts, len(tokens)))
                value_parts = []
                start = pos + 1
                continue

            if previous is LexMode.DOLLAR and state.in_ansi_c_quote:
                # Drop the '$' that opened the quote
                if value_parts:
                    value_parts.pop()
                ansi_body = []
                continue

            if ansi_body is not None:
                if state.in_ansi_c_quote:
                    ansi_body.append(char)
                else:
                    value_parts.append(decode_ansi_c("".join(ansi_body)))
                    ansi_body = None
                continue

            value_parts.append(_unquoted(previous, role, char))

        if ansi_body is not None:
            value_parts.append(decode_ansi_c("".join(ansi_body)))

        if self.text:
            tokens.append(self._make_token(start, len(self.text), value_parts, len(tokens)))

        return TokenizeResult(tokens=tokens, state=state)

    def _make_token(self, start: int, end: int, value_parts: list[str], index: int) -> Token:
        return Token(
            raw=self.text[start:end],
            value="".join(value_parts),
            start=start,
            end=end,
            index=index,
        )


def tokenize(
    text: str,
    max_tokens: int = -1,
    initial: TokenizerState | None = None,
) -> TokenizeResult:
    """Tokenize a shell statement.

    Args:
        text: The statement text
        max_tokens: Bound on the number of tokens (-1 for unbounded)
        initial: Optional starting state

    Returns:
        TokenizeResult with the tokens and the final state

    Examples:
        >>> tokenize("a 'b c' d").words
        ['a', "'b c'", 'd']

        >>> tokenize("declare -a arr=([0]=\\"x y\\")", 3).words
        ['declare', '-a', 'arr=([0]="x y")']

        >>> tokenize("echo 'unterminated").state.in_single_quote
        True
    """
    return Tokenizer(text, max_tokens, initial).tokenize()


def scan(text: str, initial: TokenizerState | None = None) -> TokenizerState:
    """Return the state after consuming text, without building tokens."""
    state = initial or INITIAL_STATE
    for char in text:
        state, _ = step(state, char)
    return state


def unquote(text: str) -> str:
    """Remove shell quoting from a single word, decoding ``$'...'`` regions."""
    result = tokenize(text, max_tokens=1)
    return result.tokens[0].value if result.tokens else ""


def escape_expansions(text: str) -> str:
    """Backslash-escape every '$' and '`' the shell would expand.

    Characters inside single quotes or already escaped are left alone, as is
    a '$' that opens ``$'...'`` or ``$"..."`` quoting.
    """
    parts: list[str] = []
    state = INITIAL_STATE

    for i, char in enumerate(text):
        if char in "$`" and state.mode in EXPANDING_MODES:
            opens_quote = (
                char == "$"
                and state.mode is not LexMode.DOUBLE_QUOTE
                and text[i + 1 : i + 2] in ("'", '"')
            )
            if not opens_quote:
                parts.append("\\")
        state, _ = step(state, char)
        parts.append(char)

    return "".join(parts)
