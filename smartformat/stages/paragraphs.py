"""
Paragraph Splitting Stage

Breaks walls of text into readable paragraphs.

Strategy:
1. Paragraphs of WALL_OF_TEXT_MIN_WORDS+ words are split before a sentence
   that opens with a transition word ("However", "Next", ...), once the
   current chunk holds TRANSITION_SPLIT_MIN_WORDS words.
2. If no transition split happened and the paragraph is very long
   (FALLBACK_SPLIT_MIN_WORDS words, FALLBACK_SPLIT_MIN_SENTENCES sentences),
   it is cut mechanically into chunks of about three sentences.

Headings, list items, blockquotes and code lines are never counted or split.
"""

import math
import re

from smartformat.config import (
    FALLBACK_SENTENCES_PER_CHUNK,
    FALLBACK_SPLIT_MIN_SENTENCES,
    FALLBACK_SPLIT_MIN_WORDS,
    TRANSITION_SPLIT_MIN_WORDS,
    WALL_OF_TEXT_MIN_WORDS,
)
from smartformat.stages.base import BaseStage, StageResult
from smartformat.utils.text_utils import is_non_prose_line, split_sentences, word_count

TRANSITION_PATTERN = re.compile(
    r'^(However|Furthermore|Moreover|Additionally|In addition|Also|Meanwhile|On the other hand|'
    r'In contrast|Conversely|Nevertheless|Nonetheless|Therefore|Consequently|As a result|Thus|'
    r'Hence|Finally|Lastly|In conclusion|To summarize|In summary|First|Second|Third|Next|Then|'
    r'Alternatively|Specifically|For example|For instance|That said|Importantly|Notably|'
    r'Significantly|On top of that|Beyond that|In particular|As such|To that end|'
    r'With that in mind|That being said|At the same time|In other words|Put differently|'
    r'More specifically|To clarify|To elaborate|In short|Overall)\b',
    re.IGNORECASE,
)


def starts_with_transition(sentence: str) -> bool:
    return bool(TRANSITION_PATTERN.match(sentence.strip()))


def sentences_with_tail(paragraph: str) -> list[str]:
    """Sentences of a paragraph; trailing text without punctuation joins the last one."""
    sentences = split_sentences(paragraph)
    if not sentences:
        return [paragraph]
    tail = paragraph[len(''.join(sentences)):]
    if tail.strip():
        sentences[-1] = sentences[-1] + tail
    return sentences


def split_at_transitions(sentences: list[str]) -> list[str]:
    """Group sentences into chunks, starting a new chunk at each late transition."""
    chunks: list[list[str]] = [[]]
    words_so_far = 0
    for sentence in sentences:
        sentence_words = word_count(sentence)
        if words_so_far >= TRANSITION_SPLIT_MIN_WORDS and starts_with_transition(sentence):
            chunks.append([sentence])
            words_so_far = sentence_words
        else:
            chunks[-1].append(sentence)
            words_so_far += sentence_words
    return [''.join(chunk).rstrip() for chunk in chunks if chunk]


def split_mechanically(sentences: list[str]) -> list[str]:
    """Cut sentences into roughly equal chunks of about three sentences."""
    chunk_count = math.ceil(len(sentences) / FALLBACK_SENTENCES_PER_CHUNK)
    chunk_size = math.ceil(len(sentences) / chunk_count)
    chunks = []
    for start in range(0, len(sentences), chunk_size):
        chunk = ''.join(sentences[start:start + chunk_size]).rstrip()
        if chunk.strip():
            chunks.append(chunk)
    return chunks


class WallOfTextSplitter(BaseStage):
    """
    Splits long single-line paragraphs into several paragraphs.

    Example input (one line, 90 words, no transitions):
        S1. S2. S3. S4. S5. S6.

    Example output:
        S1. S2. S3.

        S4. S5. S6.
    """

    name = "Wall-of-Text Splitter"
    label = "Paragraphs"

    def process(self, text: str) -> StageResult:
        out = []
        changes = 0

        for line in text.split('\n'):
            trimmed = line.strip()
            if is_non_prose_line(trimmed):
                out.append(line)
                continue

            words = word_count(trimmed)
            if words < WALL_OF_TEXT_MIN_WORDS:
                out.append(line)
                continue

            sentences = sentences_with_tail(trimmed)
            if len(sentences) < 3:
                out.append(line)
                continue

            chunks = split_at_transitions(sentences)
            if len(chunks) == 1 and words >= FALLBACK_SPLIT_MIN_WORDS \
                    and len(sentences) >= FALLBACK_SPLIT_MIN_SENTENCES:
                chunks = split_mechanically(sentences)

            if len(chunks) == 1:
                out.append(line)
                continue

            changes += 1
            out.append('\n\n'.join(chunks))

        return StageResult(text='\n'.join(out), changes_made=changes)
