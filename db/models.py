from sqlalchemy import Column, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base, declared_attr

# Define base class for Bible verses with common functionality
Base = declarative_base()


class BibleVerseBase:
    """Columns and helpers shared by every translation table"""

    id = Column(Integer, primary_key=True, index=True)
    book = Column(String(50), nullable=False, index=True)  # canonical name, "1 John"
    chapter = Column(Integer, nullable=False, index=True)
    verse = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    reference = Column(String(100), nullable=False, index=True)  # "John 3:16"

    @declared_attr
    def __table_args__(cls):
        return (Index(f"idx_{cls.__tablename__}_book_chapter_verse", "book", "chapter", "verse"),)

    def to_dict(self):
        return {
            "reference": self.reference,
            "book": self.book,
            "chapter": self.chapter,
            "verse": self.verse,
            "text": self.text,
        }

    def __repr__(self):
        return f"<{type(self).__name__}(reference='{self.reference}', text='{(self.text or '')[:50]}...')>"


# Define models for the translations that ship with verse text

# King James Version
class KJVVerse(Base, BibleVerseBase):
    __tablename__ = "kjv"


# American Standard Version
class ASVVerse(Base, BibleVerseBase):
    __tablename__ = "asv"


# World English Bible
class WEBVerse(Base, BibleVerseBase):
    __tablename__ = "web"


# New English Translation
class NETVerse(Base, BibleVerseBase):
    __tablename__ = "net"


# Dictionary to map translation ids to model classes
VERSION_MODELS = {
    "kjv": KJVVerse,
    "asv": ASVVerse,
    "web": WEBVerse,
    "net": NETVerse,
}


# Get model class by translation id
def get_verse_model(version):
    """Get the SQLAlchemy model class for a given translation id"""
    key = (version or "").lower()
    if key not in VERSION_MODELS:
        raise ValueError(f"Unknown Bible version: {version}")
    return VERSION_MODELS[key]
