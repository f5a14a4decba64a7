import re
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class TopicVerse:
    reference: str
    book: str
    chapter: int
    verse: int
    snippet: str

    def to_dict(self):
        return {
            "reference": self.reference,
            "book": self.book,
            "chapter": self.chapter,
            "verse": self.verse,
            "snippet": self.snippet,
        }


@dataclass(frozen=True)
class TopicEntry:
    topic: str
    aliases: tuple = field(default_factory=tuple)
    verses: tuple = field(default_factory=tuple)


def _v(reference: str, book: str, chapter: int, verse: int, snippet: str) -> TopicVerse:
    return TopicVerse(reference, book, chapter, verse, snippet)


def _topic(name: str, aliases: List[str], verses: List[TopicVerse]) -> TopicEntry:
    return TopicEntry(topic=name, aliases=tuple(aliases), verses=tuple(verses))


# Declaration order is the tie-break order for search_topics
TOPIC_INDEX: List[TopicEntry] = [
    _topic("Love", ["love", "loving", "charity", "beloved", "affection", "compassion"], [
        _v("1 Corinthians 13:4-7", "1 Corinthians", 13, 4, "Charity suffereth long, and is kind; charity envieth not..."),
        _v("John 3:16", "John", 3, 16, "For God so loved the world, that he gave his only begotten Son..."),
        _v("Romans 8:38-39", "Romans", 8, 38, "Neither death, nor life... shall separate us from the love of God..."),
        _v("1 John 4:19", "1 John", 4, 19, "We love him, because he first loved us."),
        _v("John 15:13", "John", 15, 13, "Greater love hath no man than this, that a man lay down his life..."),
        _v("1 John 4:8", "1 John", 4, 8, "He that loveth not knoweth not God; for God is love."),
    ]),
    _topic("Faith", ["faith", "believe", "believing", "trust", "trusting", "confidence"], [
        _v("Hebrews 11:1", "Hebrews", 11, 1, "Now faith is the substance of things hoped for..."),
        _v("Romans 10:17", "Romans", 10, 17, "So then faith cometh by hearing, and hearing by the word of God."),
        _v("Matthew 17:20", "Matthew", 17, 20, "If ye have faith as a grain of mustard seed... nothing impossible"),
        _v("Galatians 2:20", "Galatians", 2, 20, "I live by the faith of the Son of God, who loved me..."),
        _v("James 2:17", "James", 2, 17, "Even so faith, if it hath not works, is dead, being alone."),
    ]),
    _topic("Strength", ["strength", "strong", "power", "powerful", "might", "mighty", "endurance"], [
        _v("Philippians 4:13", "Philippians", 4, 13, "I can do all things through Christ which strengtheneth me."),
        _v("Isaiah 40:31", "Isaiah", 40, 31, "They that wait upon the LORD shall renew their strength..."),
        _v("Psalm 46:1", "Psalms", 46, 1, "God is our refuge and strength, a very present help in trouble."),
        _v("2 Timothy 1:7", "2 Timothy", 1, 7, "God hath not given us the spirit of fear; but of power..."),
        _v("Ephesians 6:10", "Ephesians", 6, 10, "Be strong in the Lord, and in the power of his might."),
        _v("Nehemiah 8:10", "Nehemiah", 8, 10, "The joy of the LORD is your strength."),
    ]),
    _topic("Peace", ["peace", "peaceful", "calm", "tranquility", "rest", "anxiety", "anxious", "worry", "worried", "stress"], [
        _v("Philippians 4:6-7", "Philippians", 4, 6, "Be careful for nothing... the peace of God shall keep your hearts..."),
        _v("John 14:27", "John", 14, 27, "Peace I leave with you, my peace I give unto you..."),
        _v("Isaiah 26:3", "Isaiah", 26, 3, "Thou wilt keep him in perfect peace, whose mind is stayed on thee..."),
        _v("Psalm 46:10", "Psalms", 46, 10, "Be still, and know that I am God..."),
        _v("John 16:33", "John", 16, 33, "In the world ye shall have tribulation: but be of good cheer..."),
    ]),
    _topic("Hope", ["hope", "hopeful", "hoping", "expectation", "future", "encouragement"], [
        _v("Jeremiah 29:11", "Jeremiah", 29, 11, "For I know the thoughts that I think toward you... thoughts of peace..."),
        _v("Romans 15:13", "Romans", 15, 13, "Now the God of hope fill you with all joy and peace in believing..."),
        _v("Romans 8:28", "Romans", 8, 28, "All things work together for good to them that love God..."),
        _v("Lamentations 3:22-23", "Lamentations", 3, 22, "His compassions fail not. They are new every morning..."),
    ]),
    _topic("Fear", ["fear", "afraid", "scared", "courage", "courageous", "brave", "boldness"], [
        _v("Isaiah 41:10", "Isaiah", 41, 10, "Fear thou not; for I am with thee: be not dismayed..."),
        _v("Joshua 1:9", "Joshua", 1, 9, "Be strong and of a good courage; be not afraid..."),
        _v("2 Timothy 1:7", "2 Timothy", 1, 7, "God hath not given us the spirit of fear; but of power..."),
        _v("Psalm 27:1", "Psalms", 27, 1, "The LORD is my light and my salvation; whom shall I fear?"),
        _v("Deuteronomy 31:6", "Deuteronomy", 31, 6, "Be strong and of a good courage, fear not..."),
    ]),
    _topic("Forgiveness", ["forgiveness", "forgive", "forgiving", "pardon", "mercy", "merciful"], [
        _v("1 John 1:9", "1 John", 1, 9, "If we confess our sins, he is faithful and just to forgive us..."),
        _v("Ephesians 4:32", "Ephesians", 4, 32, "Be ye kind one to another, tenderhearted, forgiving one another..."),
        _v("Colossians 3:13", "Colossians", 3, 13, "Forbearing one another, and forgiving one another..."),
        _v("Psalm 103:12", "Psalms", 103, 12, "As far as the east is from the west, so far hath he removed our transgressions..."),
    ]),
    _topic("Healing", ["healing", "heal", "health", "sickness", "sick", "disease", "recovery"], [
        _v("Jeremiah 17:14", "Jeremiah", 17, 14, "Heal me, O LORD, and I shall be healed..."),
        _v("Isaiah 53:5", "Isaiah", 53, 5, "With his stripes we are healed."),
        _v("Psalm 147:3", "Psalms", 147, 3, "He healeth the broken in heart, and bindeth up their wounds."),
        _v("James 5:14-15", "James", 5, 14, "Is any sick among you? let him call for the elders..."),
    ]),
    _topic("Wisdom", ["wisdom", "wise", "knowledge", "understanding", "discernment", "insight"], [
        _v("James 1:5", "James", 1, 5, "If any of you lack wisdom, let him ask of God..."),
        _v("Proverbs 3:5-6", "Proverbs", 3, 5, "Trust in the LORD with all thine heart..."),
        _v("Proverbs 1:7", "Proverbs", 1, 7, "The fear of the LORD is the beginning of knowledge..."),
        _v("Psalm 119:105", "Psalms", 119, 105, "Thy word is a lamp unto my feet, and a light unto my path."),
    ]),
    _topic("Prayer", ["prayer", "pray", "praying", "intercession", "supplication"], [
        _v("Philippians 4:6", "Philippians", 4, 6, "In every thing by prayer and supplication with thanksgiving..."),
        _v("1 Thessalonians 5:17", "1 Thessalonians", 5, 17, "Pray without ceasing."),
        _v("James 5:16", "James", 5, 16, "The effectual fervent prayer of a righteous man availeth much."),
        _v("Jeremiah 33:3", "Jeremiah", 33, 3, "Call unto me, and I will answer thee..."),
        _v("Matthew 7:7", "Matthew", 7, 7, "Ask, and it shall be given you; seek, and ye shall find..."),
    ]),
    _topic("Marriage", ["marriage", "married", "husband", "wife", "spouse", "wedding"], [
        _v("Genesis 2:24", "Genesis", 2, 24, "Therefore shall a man leave his father and his mother..."),
        _v("Ephesians 5:25", "Ephesians", 5, 25, "Husbands, love your wives, even as Christ also loved the church..."),
        _v("Proverbs 18:22", "Proverbs", 18, 22, "Whoso findeth a wife findeth a good thing..."),
    ]),
    _topic("Money", ["money", "wealth", "rich", "finance", "prosperity", "provision", "tithe", "giving", "generosity"], [
        _v("Matthew 6:33", "Matthew", 6, 33, "Seek ye first the kingdom of God... all these things shall be added..."),
        _v("Malachi 3:10", "Malachi", 3, 10, "Bring ye all the tithes into the storehouse... I will pour you out a blessing..."),
        _v("Philippians 4:19", "Philippians", 4, 19, "My God shall supply all your need according to his riches in glory..."),
        _v("Luke 6:38", "Luke", 6, 38, "Give, and it shall be given unto you; good measure, pressed down..."),
    ]),
    _topic("Death", ["death", "dying", "grief", "mourning", "loss", "funeral", "heaven", "eternal life", "afterlife"], [
        _v("John 11:25-26", "John", 11, 25, "I am the resurrection, and the life..."),
        _v("Psalm 23:4", "Psalms", 23, 4, "Though I walk through the valley of the shadow of death..."),
        _v("Revelation 21:4", "Revelation", 21, 4, "God shall wipe away all tears... there shall be no more death..."),
        _v("2 Corinthians 5:8", "2 Corinthians", 5, 8, "To be absent from the body, and to be present with the Lord."),
    ]),
    _topic("Depression", ["depression", "depressed", "sad", "sadness", "despair", "hopeless", "discouraged", "overwhelmed", "lonely"], [
        _v("Psalm 34:18", "Psalms", 34, 18, "The LORD is nigh unto them that are of a broken heart..."),
        _v("Psalm 42:11", "Psalms", 42, 11, "Why art thou cast down, O my soul? hope thou in God..."),
        _v("Matthew 11:28", "Matthew", 11, 28, "Come unto me, all ye that labour and are heavy laden..."),
        _v("Psalm 30:5", "Psalms", 30, 5, "Weeping may endure for a night, but joy cometh in the morning."),
    ]),
    _topic("Patience", ["patience", "patient", "waiting", "wait", "endure", "persevere", "perseverance"], [
        _v("James 1:2-4", "James", 1, 2, "Count it all joy... the trying of your faith worketh patience..."),
        _v("Romans 12:12", "Romans", 12, 12, "Rejoicing in hope; patient in tribulation; continuing instant in prayer."),
        _v("Isaiah 40:31", "Isaiah", 40, 31, "They that wait upon the LORD shall renew their strength..."),
        _v("Galatians 6:9", "Galatians", 6, 9, "Let us not be weary in well doing: for in due season we shall reap..."),
    ]),
    _topic("Anger", ["anger", "angry", "wrath", "rage", "temper", "frustrated", "frustration"], [
        _v("James 1:19-20", "James", 1, 19, "Let every man be swift to hear, slow to speak, slow to wrath..."),
        _v("Proverbs 15:1", "Proverbs", 15, 1, "A soft answer turneth away wrath..."),
        _v("Ephesians 4:26", "Ephesians", 4, 26, "Be ye angry, and sin not: let not the sun go down upon your wrath..."),
        _v("Psalm 37:8", "Psalms", 37, 8, "Cease from anger, and forsake wrath..."),
    ]),
]

TOPIC_NAME_SCORE = 10
TOPIC_ALIAS_SCORE = 5

# Prefixes that frame an utterance as a topical request
TOPIC_QUERY_PATTERNS = [
    re.compile(r"(?:verses?|scriptures?|passages?|bible)\s+(?:about|on|for|regarding)\s+", re.IGNORECASE),
    re.compile(r"(?:what|where)\s+(?:does|did|do)\s+(?:the\s+)?bible\s+(?:say|teach)\s+(?:about|on)", re.IGNORECASE),
    re.compile(r"(?:tell me|show me|find|search)\s+(?:about|for)\s+", re.IGNORECASE),
]

# Same framings, each consuming its trailing whitespace, applied in order
_KEYWORD_STRIP_PATTERNS = [
    TOPIC_QUERY_PATTERNS[0],
    re.compile(r"(?:what|where)\s+(?:does|did|do)\s+(?:the\s+)?bible\s+(?:say|teach)\s+(?:about|on)\s+", re.IGNORECASE),
    TOPIC_QUERY_PATTERNS[2],
]
_TRAILING_PUNCTUATION = re.compile(r"[?.!]")


def is_topic_query(text: str) -> bool:
    """Whether the utterance is framed as a topical request ("verses about love")"""
    if not text:
        return False
    return any(pattern.search(text) for pattern in TOPIC_QUERY_PATTERNS)


def extract_topic_keyword(text: str) -> str:
    """Strip the topical framing and punctuation, leaving the keyword"""
    keyword = text or ""
    for pattern in _KEYWORD_STRIP_PATTERNS:
        keyword = pattern.sub("", keyword, count=1)
    return _TRAILING_PUNCTUATION.sub("", keyword).strip()


def score_topic(entry: TopicEntry, query: str) -> int:
    norm = query.lower().strip()
    score = 0
    if entry.topic.lower() in norm:
        score += TOPIC_NAME_SCORE
    for alias in entry.aliases:
        if alias in norm:
            score += TOPIC_ALIAS_SCORE
    return score


def search_topics(query: str) -> List[TopicEntry]:
    """
    Rank topic entries against a query.

    A topic scores 10 when its name is a substring of the lowercased query and 5 for
    each alias that is. Zero-score topics are dropped; equal scores keep index order.
    """
    if not query or not query.strip():
        return []

    scored = [(entry, score_topic(entry, query)) for entry in TOPIC_INDEX]
    scored = [item for item in scored if item[1] > 0]
    scored.sort(key=lambda item: item[1], reverse=True)
    return [entry for entry, _ in scored]


def match_topic_alias(query: str) -> Optional[TopicEntry]:
    """Return the best-ranked topic whose alias list contains the whole trimmed query, if any"""
    norm = (query or "").lower().strip()
    if not norm:
        return None
    for entry in search_topics(norm):
        if norm in entry.aliases:
            return entry
    return None
