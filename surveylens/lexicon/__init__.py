# lexicon/
# 分析器共享的只读词表与覆盖加载。 / Read-only lexicon tables and override loading.

from surveylens.lexicon.loader import LexiconLoader
from surveylens.lexicon.tables import DEFAULT_LEXICON, Lexicon, freeze_table

__all__ = [
    "DEFAULT_LEXICON",
    "Lexicon",
    "LexiconLoader",
    "freeze_table",
]
