"""
nlptrain: Training façade over NLTK for classic NLP model families.

Reads plain-text training corpora, trains tokenizer, sentence detector,
POS tagger, name finder, chunker, treebank parser and document categorizer
models with sensible defaults, and writes the models to disk.
"""

from .errors import (
    TrainingError,
    ResourceUnreadable,
    MalformedSample,
    InvalidParameter,
    SerializationFailure,
    InsufficientTrainingData,
)
from .dictionary import Dictionary, POSDictionary, build_dictionary, build_posdictionary
from .features import DictionaryFeatureGenerator
from .models import (
    BaseModel,
    TokenizerModel,
    SentenceModel,
    POSModel,
    TokenNameFinderModel,
    ChunkerModel,
    ParserModel,
    DoccatModel,
)
from .train import (
    train_tokenizer,
    train_sentence_detector,
    train_pos_tagger,
    train_name_finder,
    train_treebank_chunker,
    train_treebank_parser,
    train_document_categorization,
)
from .persistence import write_model, load_model

__version__ = "1.0.0"
__all__ = [
    "TrainingError",
    "ResourceUnreadable",
    "MalformedSample",
    "InvalidParameter",
    "SerializationFailure",
    "InsufficientTrainingData",
    "Dictionary",
    "POSDictionary",
    "build_dictionary",
    "build_posdictionary",
    "DictionaryFeatureGenerator",
    "BaseModel",
    "TokenizerModel",
    "SentenceModel",
    "POSModel",
    "TokenNameFinderModel",
    "ChunkerModel",
    "ParserModel",
    "DoccatModel",
    "train_tokenizer",
    "train_sentence_detector",
    "train_pos_tagger",
    "train_name_finder",
    "train_treebank_chunker",
    "train_treebank_parser",
    "train_document_categorization",
    "write_model",
    "load_model",
]
