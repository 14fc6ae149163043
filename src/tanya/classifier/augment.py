"""Synthetic training examples from corpus entries.

Two kinds of variants keep the answer and tags of their source entry:

- typos: keyboard-neighbour substitution, character omission and
  character duplication
- word order: one adjacent swap and one relocation (word ``i`` moved to
  position ``(i + 2) % n``)

Randomness comes from an injected ``random.Random`` so runs are
reproducible under a fixed seed.

Example:
    >>> import random
    >>> from tanya.classifier.augment import AugmentationGenerator
    >>> generator = AugmentationGenerator(rng=random.Random(7))
    >>> variants = generator.generate(entries)
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import replace
from typing import Sequence

from tanya.config import AugmentationConfig
from tanya.search import lexicon
from tanya.search.types import CorpusEntry

logger = logging.getLogger(__name__)


class AugmentationGenerator:
    """Bounded typo / word-order augmentation.

    Args:
        config: Sampling limits and high-value categories
        rng: Random source; a fresh unseeded ``random.Random`` if omitted
    """

    def __init__(self, config: AugmentationConfig | None = None, rng: random.Random | None = None):
        self.config = config or AugmentationConfig()
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Word-level variants
    # ------------------------------------------------------------------

    def substitute(self, word: str) -> str | None:
        positions = [i for i, ch in enumerate(word) if ch in lexicon.KEYBOARD_NEIGHBOURS]
        if not positions:
            return None
        i = self.rng.choice(positions)
        neighbour = self.rng.choice(lexicon.KEYBOARD_NEIGHBOURS[word[i]])
        return word[:i] + neighbour + word[i + 1:]

    def omit(self, word: str) -> str | None:
        if len(word) <= 3:
            return None
        i = self.rng.randrange(len(word))
        return word[:i] + word[i + 1:]

    def duplicate(self, word: str) -> str:
        i = self.rng.randrange(len(word))
        return word[:i + 1] + word[i:]

    # ------------------------------------------------------------------
    # Sentence-level variants
    # ------------------------------------------------------------------

    def typo_variants(self, text: str) -> list[str]:
        words = text.split()
        candidates = [i for i, word in enumerate(words) if len(word) >= 2]
        if not candidates:
            return []

        variants: list[str] = []
        for _ in range(min(self.config.max_typo_variants, len(words))):
            i = self.rng.choice(candidates)
            typo = self.substitute(words[i])
            if typo:
                variants.append(self._replace_word(words, i, typo))

        i = self.rng.choice(candidates)
        omitted = self.omit(words[i])
        if omitted:
            variants.append(self._replace_word(words, i, omitted))

        i = self.rng.choice(candidates)
        variants.append(self._replace_word(words, i, self.duplicate(words[i])))
        return variants

    def word_order_variants(self, text: str) -> list[str]:
        words = text.split()
        n = len(words)
        if n < 3:
            return []

        variants: list[str] = []
        i = self.rng.randrange(n - 1)
        swapped = list(words)
        swapped[i], swapped[i + 1] = swapped[i + 1], swapped[i]
        variants.append(" ".join(swapped))

        if n >= 4:
            i = self.rng.randrange(n)
            moved = list(words)
            word = moved.pop(i)
            moved.insert((i + 2) % n, word)
            variants.append(" ".join(moved))
        return variants

    @staticmethod
    def _replace_word(words: Sequence[str], index: int, word: str) -> str:
        return " ".join(word if i == index else w for i, w in enumerate(words))

    # ------------------------------------------------------------------
    # Corpus-level generation
    # ------------------------------------------------------------------

    def sample_size(self, corpus_size: int) -> int:
        if corpus_size > self.config.limited_mode_threshold:
            ratio = max(0.01, 0.1 - corpus_size / 100_000)
            return min(math.ceil(corpus_size * ratio), self.config.limited_hard_cap)
        return min(corpus_size, self.config.max_samples)

    def generate(self, entries: Sequence[CorpusEntry]) -> list[CorpusEntry]:
        """Augmented copies of a bounded sample of ``entries``."""
        if not entries:
            return []
        limited = len(entries) > self.config.limited_mode_threshold
        sample = self._sample(entries, limited)

        augmented: list[CorpusEntry] = []
        for position, entry in enumerate(sample):
            question = entry.question.lower()
            if limited:
                # One variant per entry, alternating kind.
                pool = self.typo_variants(question) if position % 2 == 0 else self.word_order_variants(question)
                if not pool:
                    pool = self.typo_variants(question)
                texts = pool[:1]
            else:
                texts = self.typo_variants(question) + self.word_order_variants(question)

            seen = {question}
            for text in texts:
                if text and text not in seen:
                    seen.add(text)
                    augmented.append(replace(entry, question=text))

        logger.info(
            f"[AugmentationGenerator] {len(sample)} sampled entries -> "
            f"{len(augmented)} variants ({'limited' if limited else 'full'} mode)"
        )
        return augmented

    def _sample(self, entries: Sequence[CorpusEntry], limited: bool) -> list[CorpusEntry]:
        size = self.sample_size(len(entries))
        if not limited:
            return self.rng.sample(list(entries), size)

        high_value = set(self.config.high_value_categories)
        priority = [e for e in entries if e.tags & high_value or e.category in high_value]
        general = [e for e in entries if not (e.tags & high_value or e.category in high_value)]

        chosen = self.rng.sample(priority, min(size, len(priority)))
        remaining = size - len(chosen)
        if remaining > 0:
            chosen += self.rng.sample(general, min(remaining, len(general)))
        return chosen
