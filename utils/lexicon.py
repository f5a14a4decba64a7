from dataclasses import dataclass
from typing import Dict, List, Tuple

# Static lookup tables shared by the parsing modules.
# Everything in here is built once at import time and never mutated.


@dataclass(frozen=True)
class BookDescriptor:
    name: str
    abbreviations: Tuple[str, ...]
    chapter_count: int

    @property
    def name_words(self) -> List[str]:
        return self.name.lower().split()


def _book(name: str, abbreviations: List[str], chapters: int) -> BookDescriptor:
    return BookDescriptor(name=name, abbreviations=tuple(abbreviations), chapter_count=chapters)


# Abbreviations that collide with everyday English ("is", "so", "am", "do"...) are left out
# on purpose, spoken input is full of them.
BIBLE_BOOKS: List[BookDescriptor] = [
    # Old Testament
    _book("Genesis", ["gen", "ge", "gn"], 50),
    _book("Exodus", ["exod", "exo", "ex"], 40),
    _book("Leviticus", ["lev", "lv"], 27),
    _book("Numbers", ["num", "nm", "nb"], 36),
    _book("Deuteronomy", ["deut", "dt"], 34),
    _book("Joshua", ["josh", "jos", "jsh"], 24),
    _book("Judges", ["judg", "jdg", "jdgs"], 21),
    _book("Ruth", ["rth", "ru"], 4),
    _book("1 Samuel", ["1sam", "1sa", "1 sam", "first samuel", "1st samuel"], 31),
    _book("2 Samuel", ["2sam", "2sa", "2 sam", "second samuel", "2nd samuel"], 24),
    _book("1 Kings", ["1kgs", "1ki", "1 kgs", "first kings", "1st kings"], 22),
    _book("2 Kings", ["2kgs", "2ki", "2 kgs", "second kings", "2nd kings"], 25),
    _book("1 Chronicles", ["1chr", "1ch", "1 chron", "first chronicles", "1st chronicles"], 29),
    _book("2 Chronicles", ["2chr", "2ch", "2 chron", "second chronicles", "2nd chronicles"], 36),
    _book("Ezra", ["ezr"], 10),
    _book("Nehemiah", ["neh"], 13),
    _book("Esther", ["esth", "est"], 10),
    _book("Job", ["jb"], 42),
    _book("Psalms", ["psalm", "ps", "psa", "psm", "pss"], 150),
    _book("Proverbs", ["prov", "prv", "pr"], 31),
    _book("Ecclesiastes", ["eccl", "ecc", "qoh"], 12),
    _book("Song of Solomon", ["song of songs", "songs", "song", "sos"], 8),
    _book("Isaiah", ["isa"], 66),
    _book("Jeremiah", ["jer", "jr"], 52),
    _book("Lamentations", ["lam"], 5),
    _book("Ezekiel", ["ezek", "eze", "ezk"], 48),
    _book("Daniel", ["dan", "dn"], 12),
    _book("Hosea", ["hos"], 14),
    _book("Joel", ["jl"], 3),
    _book("Amos", ["amo"], 9),
    _book("Obadiah", ["obad", "ob"], 1),
    _book("Jonah", ["jon", "jnh"], 4),
    _book("Micah", ["mic", "mc"], 7),
    _book("Nahum", ["nah"], 3),
    _book("Habakkuk", ["hab", "hb"], 3),
    _book("Zephaniah", ["zeph", "zep", "zp"], 3),
    _book("Haggai", ["hag", "hg"], 2),
    _book("Zechariah", ["zech", "zec", "zc"], 14),
    _book("Malachi", ["mal", "ml"], 4),
    # New Testament
    _book("Matthew", ["matt", "mat", "mt"], 28),
    _book("Mark", ["mrk", "mk"], 16),
    _book("Luke", ["luk", "lk"], 24),
    _book("John", ["joh", "jn", "jhn"], 21),
    _book("Acts", ["act"], 28),
    _book("Romans", ["rom", "rm"], 16),
    _book("1 Corinthians", ["1cor", "1co", "1 cor", "first corinthians", "1st corinthians"], 16),
    _book("2 Corinthians", ["2cor", "2co", "2 cor", "second corinthians", "2nd corinthians"], 13),
    _book("Galatians", ["gal"], 6),
    _book("Ephesians", ["eph", "ephes"], 6),
    _book("Philippians", ["phil", "php"], 4),
    _book("Colossians", ["col"], 4),
    _book("1 Thessalonians", ["1thess", "1th", "1 thess", "first thessalonians", "1st thessalonians"], 5),
    _book("2 Thessalonians", ["2thess", "2th", "2 thess", "second thessalonians", "2nd thessalonians"], 3),
    _book("1 Timothy", ["1tim", "1ti", "1 tim", "first timothy", "1st timothy"], 6),
    _book("2 Timothy", ["2tim", "2ti", "2 tim", "second timothy", "2nd timothy"], 4),
    _book("Titus", ["tit"], 3),
    _book("Philemon", ["phlm", "phm", "philem"], 1),
    _book("Hebrews", ["heb"], 13),
    _book("James", ["jas", "jm"], 5),
    _book("1 Peter", ["1pet", "1pe", "1pt", "1 pet", "first peter", "1st peter"], 5),
    _book("2 Peter", ["2pet", "2pe", "2pt", "2 pet", "second peter", "2nd peter"], 3),
    _book("1 John", ["1john", "1jn", "1jo", "1 jn", "first john", "1st john"], 5),
    _book("2 John", ["2john", "2jn", "2jo", "2 jn", "second john", "2nd john"], 1),
    _book("3 John", ["3john", "3jn", "3jo", "3 jn", "third john", "3rd john"], 1),
    _book("Jude", ["jud", "jd"], 1),
    _book("Revelation", ["revelations", "rev", "rv"], 22),
]

BOOKS_BY_NAME: Dict[str, BookDescriptor] = {book.name.lower(): book for book in BIBLE_BOOKS}

# Every individual word that can take part in a book name or abbreviation
BOOK_WORDS = frozenset(
    word
    for book in BIBLE_BOOKS
    for form in (book.name.lower(),) + book.abbreviations
    for word in form.split()
)

# Number words to integers. Ordinal forms are included because spoken
# references often say "first" or "1st" where a digit is meant.
NUMBER_WORDS: Dict[str, int] = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14, "fifteen": 15,
    "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19, "twenty": 20,
    "twenty-one": 21, "twenty-two": 22, "twenty-three": 23, "twenty-four": 24, "twenty-five": 25,
    "twenty-six": 26, "twenty-seven": 27, "twenty-eight": 28, "twenty-nine": 29, "thirty": 30,
    "thirty-one": 31, "thirty-two": 32, "thirty-three": 33, "thirty-four": 34, "thirty-five": 35,
    "thirty-six": 36, "thirty-seven": 37, "thirty-eight": 38, "thirty-nine": 39, "forty": 40,
    "fifty": 50, "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
    "hundred": 100, "one hundred": 100,
    "first": 1, "second": 2, "third": 3,
    "1st": 1, "2nd": 2, "3rd": 3,
}

# Ordinal words that can prefix a numbered book ("first john", "2nd kings")
ORDINAL_PREFIXES: Dict[str, str] = {
    "first": "1", "1st": "1",
    "second": "2", "2nd": "2",
    "third": "3", "3rd": "3",
}

# Words that mark a position inside a reference without carrying a value
STRUCTURAL_WORDS = frozenset(["chapter", "chapters", "verse", "verses", "vs", "v"])

# Noise that speech-to-text leaves around a reference
FILLER_WORDS = frozenset([
    # hesitations and discourse markers
    "um", "umm", "uh", "uhh", "er", "ah", "hmm", "so", "like", "okay", "ok", "well",
    "now", "just", "actually", "basically", "right", "alright", "yeah", "yes",
    # politeness
    "please", "kindly", "thanks", "thank", "hey", "hi", "hello",
    # pronouns and determiners
    "i", "me", "my", "we", "us", "our", "you", "your", "it", "that", "this", "there",
    "the", "a", "an", "some",
    # question words and copulas
    "what", "where", "which", "does", "did", "say", "says", "said", "tell",
    "is", "am", "are", "was", "were", "be",
    # verbs of navigation
    "show", "open", "find", "go", "goto", "read", "display", "pull", "turn", "get",
    "give", "bring", "take", "let", "lets", "let's", "search", "look", "see",
    "want", "wanna", "need", "can", "could", "would", "will", "do",
    # prepositions and glue
    "to", "up", "at", "in", "from", "of", "and", "for", "on", "about", "with",
    # scripture framing
    "book", "gospel", "letter", "epistle", "according", "saint", "st",
    # wake words
    "voicebible", "voice", "bible", "app", "scripture", "media",
])

# Curated phrase -> reference table. Insertion order is the match priority.
FAMOUS_PHRASES: Dict[str, Tuple[str, int, int]] = {
    "the lord is my shepherd": ("Psalms", 23, 1),
    "for god so loved the world": ("John", 3, 16),
    "in the beginning": ("Genesis", 1, 1),
    "i can do all things": ("Philippians", 4, 13),
    "love is patient": ("1 Corinthians", 13, 4),
    "be strong and courageous": ("Joshua", 1, 9),
    "trust in the lord": ("Proverbs", 3, 5),
    "fear not": ("Isaiah", 41, 10),
    "the lord is my light": ("Psalms", 27, 1),
    "blessed are the poor in spirit": ("Matthew", 5, 3),
    "our father who art in heaven": ("Matthew", 6, 9),
    "the fruit of the spirit": ("Galatians", 5, 22),
    "faith hope and love": ("1 Corinthians", 13, 13),
    "all things work together": ("Romans", 8, 28),
    "do not be anxious": ("Philippians", 4, 6),
    "i am the way": ("John", 14, 6),
    "be still and know": ("Psalms", 46, 10),
    "create in me a clean heart": ("Psalms", 51, 10),
    "the wages of sin": ("Romans", 6, 23),
    "by grace you have been saved": ("Ephesians", 2, 8),
    "jesus wept": ("John", 11, 35),
}

# Translations a user can switch to, id -> display name
AVAILABLE_TRANSLATIONS: Dict[str, str] = {
    "kjv": "King James Version",
    "kjv_strongs": "KJV w/ Strongs",
    "kjvpce": "KJV (Pure Cambridge)",
    "asv": "American Standard Version",
    "bishops": "Bishops Bible (1568)",
    "coverdale": "Coverdale Bible (1535)",
    "geneva": "Geneva Bible (1599)",
    "net": "New English Translation",
    "tyndale": "Tyndale Bible (1526)",
    "web": "World English Bible",
}

# Spoken or typed translation names -> translation id
TRANSLATION_ALIASES: Dict[str, str] = {
    "king james version": "kjv",
    "king james": "kjv",
    "authorized version": "kjv",
    "kjv": "kjv",
    "k j v": "kjv",
    "kjv strongs": "kjv_strongs",
    "strongs": "kjv_strongs",
    "pure cambridge": "kjvpce",
    "american standard version": "asv",
    "american standard": "asv",
    "asv": "asv",
    "a s v": "asv",
    "bishops bible": "bishops",
    "coverdale": "coverdale",
    "geneva": "geneva",
    "new english translation": "net",
    "net bible": "net",
    "tyndale": "tyndale",
    "world english bible": "web",
    "world english": "web",
}

# Words that may trail a translation name and belong to the same span
TRANSLATION_SUFFIXES = ("version", "translation", "bible")
