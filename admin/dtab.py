from collections.abc import Iterator
from dataclasses import dataclass
import re
from typing import ClassVar, TypeAlias

DEFAULT_WEIGHT = 1.0


class DtabParseError(ValueError):
    def __init__(self, message: str, text: str, position: int | None = None):
        if position is not None:
            message = f'{message} at position {position} in dtab: {text!r}'
        else:
            message = f'{message} in dtab: {text!r}'
        super().__init__(message)
        self.text = text
        self.position = position


@dataclass(frozen=True)
class Path:
    segments: tuple[str, ...] = ()

    _SHOWABLE: ClassVar[re.Pattern[str]] = re.compile(r'[A-Za-z0-9_:.#$%\-]')

    @classmethod
    def _escape(cls, segment: str) -> str:
        return ''.join(
            ch if cls._SHOWABLE.fullmatch(ch) else f'\\x{ord(ch):02x}'
            for ch in segment
        )

    @property
    def show(self) -> str:
        if not self.segments:
            return '/'
        return ''.join('/' + self._escape(segment) for segment in self.segments)


@dataclass(frozen=True)
class Leaf:
    path: Path


@dataclass(frozen=True)
class Weighted:
    weight: float
    tree: 'NameTree'


@dataclass(frozen=True)
class Alt:
    trees: tuple['NameTree', ...]


@dataclass(frozen=True)
class Union:
    weighted: tuple[Weighted, ...]


@dataclass(frozen=True)
class Neg:
    pass


@dataclass(frozen=True)
class Fail:
    pass


@dataclass(frozen=True)
class Empty:
    pass


NameTree: TypeAlias = Leaf | Alt | Union | Neg | Fail | Empty


def _show_simple(tree: NameTree) -> str:
    if isinstance(tree, Alt | Union):
        return f'({show_tree(tree)})'
    return show_tree(tree)


def _show_weighted(weighted: Weighted) -> str:
    if weighted.weight == DEFAULT_WEIGHT:
        return _show_simple(weighted.tree)
    return f'{weighted.weight}*{_show_simple(weighted.tree)}'


def show_tree(tree: NameTree) -> str:
    match tree:
        case Leaf(path=path):
            return path.show
        case Alt(trees=trees):
            return ' | '.join(
                f'({show_tree(t)})' if isinstance(t, Alt) else show_tree(t)
                for t in trees
            )
        case Union(weighted=weighted):
            return ' & '.join(_show_weighted(w) for w in weighted)
        case Neg():
            return '~'
        case Fail():
            return '!'
        case Empty():
            return '$'
    raise TypeError(f'Not a name tree: {tree!r}')


@dataclass(frozen=True)
class Dentry:
    prefix: Path
    dst: NameTree

    @property
    def show(self) -> str:
        return f'{self.prefix.show} => {show_tree(self.dst)}'


@dataclass(frozen=True)
class Dtab:
    dentries: tuple[Dentry, ...] = ()

    def __iter__(self) -> Iterator[Dentry]:
        return iter(self.dentries)

    def __len__(self) -> int:
        return len(self.dentries)

    @property
    def show(self) -> str:
        return ';'.join(dentry.show for dentry in self.dentries)

    @classmethod
    def read(cls, text: str) -> 'Dtab':
        return DtabParser(text).parse_dtab()


class DtabParser:
    _SEGMENT_CHAR: ClassVar[re.Pattern[str]] = re.compile(r'[A-Za-z0-9_:.#$%\-]')
    _NUMBER: ClassVar[re.Pattern[str]] = re.compile(r'\d+(?:\.\d*)?|\.\d+')

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _error(self, message: str) -> DtabParseError:
        return DtabParseError(message, self.text, self.pos)

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self) -> str | None:
        self._skip_whitespace()
        return self.text[self.pos] if self.pos < len(self.text) else None

    def _accept(self, token: str) -> bool:
        self._skip_whitespace()
        if self.text.startswith(token, self.pos):
            self.pos += len(token)
            return True
        return False

    def _expect(self, token: str) -> None:
        if not self._accept(token):
            raise self._error(f'Expected {token!r}')

    def parse_dtab(self) -> Dtab:
        dentries: list[Dentry] = []
        while self._peek() is not None:
            dentries.append(self.parse_dentry())
            if not self._accept(';'):
                break
        if self._peek() is not None:
            raise self._error('Unexpected trailing input')
        return Dtab(tuple(dentries))

    def parse_dentry(self) -> Dentry:
        prefix = self.parse_path()
        self._expect('=>')
        return Dentry(prefix, self.parse_tree())

    def parse_path(self) -> Path:
        if self._peek() != '/':
            raise self._error("Expected '/'")
        segments: list[str] = []
        while self.pos < len(self.text) and self.text[self.pos] == '/':
            self.pos += 1
            segment = self._parse_segment()
            if not segment:
                if segments or self._at_segment_start():
                    raise self._error('Empty path segment')
                return Path()
            segments.append(segment)
        return Path(tuple(segments))

    def _at_segment_start(self) -> bool:
        return self.pos < len(self.text) and self.text[self.pos] == '/'

    def _parse_segment(self) -> str:
        chars: list[str] = []
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == '\\':
                chars.append(self._parse_escape())
            elif self._SEGMENT_CHAR.fullmatch(ch):
                chars.append(ch)
                self.pos += 1
            else:
                break
        return ''.join(chars)

    def _parse_escape(self) -> str:
        digits = self.text[self.pos + 2 : self.pos + 4]
        if self.text[self.pos + 1 : self.pos + 2] != 'x' or not re.fullmatch(
            r'[0-9a-fA-F]{2}', digits
        ):
            raise self._error('Invalid escape sequence')
        self.pos += 4
        return chr(int(digits, 16))

    def parse_tree(self) -> NameTree:
        trees = [self._parse_union()]
        while self._accept('|'):
            trees.append(self._parse_union())
        return trees[0] if len(trees) == 1 else Alt(tuple(trees))

    def _parse_union(self) -> NameTree:
        weighted = [self._parse_weighted()]
        while self._accept('&'):
            weighted.append(self._parse_weighted())
        if len(weighted) == 1 and weighted[0].weight == DEFAULT_WEIGHT:
            return weighted[0].tree
        return Union(tuple(weighted))

    def _parse_weighted(self) -> Weighted:
        self._skip_whitespace()
        match = self._NUMBER.match(self.text, self.pos)
        if match is None:
            return Weighted(DEFAULT_WEIGHT, self._parse_simple())
        self.pos = match.end()
        self._expect('*')
        return Weighted(float(match.group()), self._parse_simple())

    def _parse_simple(self) -> NameTree:
        ch = self._peek()
        if ch == '(':
            self.pos += 1
            tree = self.parse_tree()
            self._expect(')')
            return tree
        if ch == '~':
            self.pos += 1
            return Neg()
        if ch == '!':
            self.pos += 1
            return Fail()
        if ch == '$':
            self.pos += 1
            return Empty()
        if ch == '/':
            return Leaf(self.parse_path())
        raise self._error('Expected name tree')


def read_dtab(text: str) -> Dtab:
    return Dtab.read(text)
