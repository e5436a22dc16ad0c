"""
Grammar Correction Stages

Light-touch fixes for text typed in a hurry:

- ContractionFixer: dont -> don't
- PronounFixer: standalone i -> I
- RepeatedWordFixer: "the the" -> "the"
- SpacingFixer: double spaces, missing space after punctuation
- SentenceCapitalizer: first letter of sentences and list items
- CommonMisspellingFixer: teh -> the, alot -> a lot, ...

All stages report the "Grammar" label.
"""

import re

from smartformat.stages.base import BaseStage, StageResult


def _apply_fixes(text: str, fixes: tuple[tuple[re.Pattern, str], ...]) -> StageResult:
    result = text
    changes = 0
    for pattern, replacement in fixes:
        result, count = pattern.subn(replacement, result)
        changes += count
    return StageResult(text=result, changes_made=changes if result != text else 0)


def _word_fixes(pairs: tuple[tuple[str, str], ...]) -> tuple[tuple[re.Pattern, str], ...]:
    return tuple((re.compile(p, re.IGNORECASE), r) for p, r in pairs)


CONTRACTIONS = _word_fixes((
    (r'\bdont\b', "don't"), (r'\bcant\b', "can't"), (r'\bwont\b', "won't"),
    (r'\bshouldnt\b', "shouldn't"), (r'\bwouldnt\b', "wouldn't"), (r'\bcouldnt\b', "couldn't"),
    (r'\bisnt\b', "isn't"), (r'\barent\b', "aren't"), (r'\bwasnt\b', "wasn't"),
    (r'\bwerent\b', "weren't"), (r'\bdoesnt\b', "doesn't"), (r'\bhasnt\b', "hasn't"),
    (r'\bhavent\b', "haven't"), (r'\bhadnt\b', "hadn't"), (r'\btheyre\b', "they're"),
    (r'\byoure\b', "you're"), (r'\bthats\b', "that's"), (r'\bwhats\b', "what's"),
    (r'\bheres\b', "here's"), (r'\btheres\b', "there's"), (r'\bive\b', "I've"),
))


class ContractionFixer(BaseStage):
    name = "Contraction Fixer"
    label = "Grammar"

    def process(self, text: str) -> StageResult:
        return _apply_fixes(text, CONTRACTIONS)


class PronounFixer(BaseStage):
    """Capitalizes the standalone pronoun "i" ("i think" -> "I think")."""

    name = "Pronoun Fixer"
    label = "Grammar"

    PATTERN = re.compile(r"(^|[.!?:;,\s])i(?!\.e\b)(?=[\s'.!?,;:]|$)", re.MULTILINE)

    def process(self, text: str) -> StageResult:
        result, count = self.PATTERN.subn(r'\1I', text)
        return StageResult(text=result, changes_made=count)


# Legitimate doubled words ("ha ha", "so so", "bye bye")
_ALLOWED_REPEATS = re.compile(r'^(ha|he|la|na|do|go|no|so|bye|cha)$', re.IGNORECASE)


class RepeatedWordFixer(BaseStage):
    name = "Repeated Word Fixer"
    label = "Grammar"

    PATTERN = re.compile(r'\b(\w{2,})[ \t]+\1\b', re.IGNORECASE)

    def process(self, text: str) -> StageResult:
        changes = 0

        def collapse(match):
            nonlocal changes
            if _ALLOWED_REPEATS.match(match.group(1)):
                return match.group(0)
            changes += 1
            return match.group(1)

        result = self.PATTERN.sub(collapse, text)
        return StageResult(text=result, changes_made=changes)


_NO_SPACE_BEFORE_CAPITAL = re.compile(r'https?$|www$|\.\w$|e\.g$|i\.e$', re.IGNORECASE)
_NO_SPACE_BEFORE_LOWER = re.compile(r'https?:/|www\.|[a-zA-Z]$|e\.g|i\.e|\d$', re.IGNORECASE)


class SpacingFixer(BaseStage):
    """
    Normalizes spacing around punctuation.

    - "two  spaces" -> "two spaces" (indentation is kept)
    - "end.Next" -> "end. Next" unless it looks like a URL, domain or e.g./i.e.
    - ").next" -> "). Next"
    """

    name = "Spacing Fixer"
    label = "Grammar"

    DOUBLE_SPACE = re.compile(r'(\S)  +(\S)')
    PUNCT_BEFORE_CAPITAL = re.compile(r'([.!?,;:])([A-Z])')
    PERIOD_BEFORE_LOWER = re.compile(r'(\.)([a-z])')

    def process(self, text: str) -> StageResult:
        changes = 0

        result, count = self.DOUBLE_SPACE.subn(r'\1 \2', text)
        changes += count

        def space_capital(match):
            nonlocal changes
            before = match.string[max(0, match.start() - 5):match.start()]
            if _NO_SPACE_BEFORE_CAPITAL.search(before):
                return match.group(0)
            changes += 1
            return f"{match.group(1)} {match.group(2)}"

        result = self.PUNCT_BEFORE_CAPITAL.sub(space_capital, result)

        def space_lower(match):
            nonlocal changes
            before = match.string[max(0, match.start() - 10):match.start()]
            if _NO_SPACE_BEFORE_LOWER.search(before) or re.search(r'\.\w+$', before):
                return match.group(0)
            changes += 1
            return f"{match.group(1)} {match.group(2).upper()}"

        result = self.PERIOD_BEFORE_LOWER.sub(space_lower, result)
        return StageResult(text=result, changes_made=changes if result != text else 0)


# Lines led by these words are probably code and keep their lowercase
CODE_KEYWORDS = frozenset({
    'const', 'let', 'var', 'function', 'import', 'export', 'return', 'if', 'else', 'for',
    'while', 'class', 'interface', 'type', 'def', 'fn', 'func',
})

_LIST_ITEM_LEAD = re.compile(r'^(\s*(?:[-*+•]|\d+[.)])\s+)([a-z])(\w*)(.*)$')
_ABBREVIATION_END = re.compile(r'(?:\be\.g|\bi\.e|\betc|\bvs|\bdr|\bmr|\bmrs|\bms)$', re.IGNORECASE)


def is_code_keyword(word: str) -> bool:
    return word in CODE_KEYWORDS


class SentenceCapitalizer(BaseStage):
    """
    Capitalizes list items, line starts and sentence starts.

    Lines led by a code keyword ("return the value") and camelCase words
    ("iPhone") are left alone, as are sentences after e.g./etc./Dr.
    """

    name = "Sentence Capitalizer"
    label = "Grammar"

    SENTENCE_START = re.compile(r'([.!?])\s+([a-z])')

    def _capitalize_line(self, line: str) -> str:
        t = line.strip()
        if not t or re.match(r'^[#>|`{<]', t):
            return line

        item = _LIST_ITEM_LEAD.match(line)
        if item:
            if is_code_keyword(item.group(2) + item.group(3)):
                return line
            return item.group(1) + item.group(2).upper() + item.group(3) + item.group(4)
        if re.match(r'^(?:[-*+•]|\d+[.)])\s', t) or t.startswith('**'):
            return line

        word = re.match(r'^[a-z]\w*', t)
        if word and not re.search(r'[A-Z]', word.group(0)[1:]) and not is_code_keyword(word.group(0)):
            indent = line[:len(line) - len(line.lstrip())]
            return indent + t[0].upper() + t[1:]
        return line

    def process(self, text: str) -> StageResult:
        changes = 0
        out = []
        for line in text.split('\n'):
            capitalized = self._capitalize_line(line)
            if capitalized != line:
                changes += 1
            out.append(capitalized)
        joined = '\n'.join(out)

        def capitalize_sentence(match):
            nonlocal changes
            if _ABBREVIATION_END.search(match.string[max(0, match.start() - 6):match.start()]):
                return match.group(0)
            changes += 1
            return f"{match.group(1)} {match.group(2).upper()}"

        result = self.SENTENCE_START.sub(capitalize_sentence, joined)
        return StageResult(text=result, changes_made=changes if result != text else 0)


MISSPELLINGS = _word_fixes((
    (r'\balot\b', 'a lot'), (r'\baswell\b', 'as well'), (r'\binfact\b', 'in fact'),
    (r'\binorder\b', 'in order'), (r'\batleast\b', 'at least'), (r'\bincase\b', 'in case'),
    (r'\beventhough\b', 'even though'), (r'\beachother\b', 'each other'),
    (r'\bfor awhile\b', 'for a while'), (r'\bnoone\b', 'no one'),
    (r'\bcan not\b', 'cannot'), (r'\betc\b(?!\.)', 'etc.'),
    (r'\bteh\b', 'the'), (r'\brecieve\b', 'receive'), (r'\bseperate\b', 'separate'),
    (r'\boccured\b', 'occurred'), (r'\bdefinate\b', 'definite'),
    (r'\bneccessary\b', 'necessary'), (r'\bneccesary\b', 'necessary'),
    (r'\baccomodate\b', 'accommodate'), (r'\boccassion\b', 'occasion'),
    (r'\buntill\b', 'until'), (r'\bwich\b', 'which'), (r'\bbeacuse\b', 'because'),
    (r'\bwether\b', 'whether'), (r'\benviroment\b', 'environment'),
    (r'\bgoverment\b', 'government'), (r'\bimmediatly\b', 'immediately'),
    (r'\bforiegn\b', 'foreign'), (r'\bwierd\b', 'weird'),
    (r'\bsuccesful\b', 'successful'), (r'\bsuccesfully\b', 'successfully'),
))


class CommonMisspellingFixer(BaseStage):
    name = "Common Misspelling Fixer"
    label = "Grammar"

    def process(self, text: str) -> StageResult:
        return _apply_fixes(text, MISSPELLINGS)
