"""Static word lists used by the sentiment scorer. Loaded once, shared read-only."""

from typing import FrozenSet

POSITIVE_WORDS = frozenset("""
amazing awesome beautiful best better brilliant cheerful clean comfortable cool
delight delighted delightful durable easy effective efficient elegant enjoy
enjoyed excellent exceptional fantastic fast favorite fine flawless fun glad good
gorgeous great happy helpful ideal impressed impressive incredible intuitive
like liked love loved lovely magnificent marvelous nice outstanding perfect
pleasant pleased powerful quality recommend reliable satisfied smooth solid
sturdy superb superior terrific useful valuable wonderful worth worthwhile
""".split())

NEGATIVE_WORDS = frozenset("""
annoying awful bad broke broken buggy cheap clunky crap crappy damaged dead
defective difficult disappoint disappointed disappointing disappointment dreadful
expensive fail failed failure faulty flimsy frustrated frustrating garbage hate
hated horrible inferior junk lousy mediocre noisy overpriced pathetic poor
poorly problem problems refund regret ridiculous slow sucks terrible trash
ugly unhappy unreliable unusable useless waste worse worst worthless wrong
""".split())

INTENSIFIERS = frozenset("""
absolutely completely especially exceptionally extremely highly incredibly
really remarkably so super terribly too totally truly utterly very
""".split())

NEGATIONS = frozenset("""
aint arent cannot cant couldnt didnt doesnt dont hardly isnt lack neither
never no nobody none nor not nothing nowhere shouldnt wasnt werent without
wont wouldnt don't doesn't didn't isn't wasn't aren't weren't can't couldn't
won't wouldn't shouldn't ain't
""".split())

_WORD_SETS = {
    "positive": POSITIVE_WORDS,
    "negative": NEGATIVE_WORDS,
    "intensifier": INTENSIFIERS,
    "negation": NEGATIONS,
}


def word_set(name: str) -> FrozenSet[str]:
    """Look up a word list by name ('positive', 'negative', 'intensifier', 'negation')."""
    try:
        return _WORD_SETS[name]
    except KeyError:
        raise ValueError(f"Unknown sentiment word set: {name!r}") from None
