"""nbtext -- small-corpus binary text classification with Naive Bayes."""

__version__ = "0.1.0"

from .config import PipelineConfig
from .corpus import load_corpus
from .errors import EmptyVocabularyError, NbtextError, VocabularyMismatchError
from .evaluation import (
    CrossValidationResult,
    FoldResult,
    HoldoutResult,
    cross_validate,
    holdout_evaluate,
)
from .features import (
    DocumentTermMatrix,
    Vocabulary,
    bigrams,
    build_dtm,
    inverse_document_frequency,
    ngrams,
    tfidf,
    top_terms,
    transform,
)
from .metrics import ClassificationMetrics, ConfusionMatrix, evaluate
from .models import Document, TokenizedDocument
from .naive_bayes import TrainedNaiveBayes, fit, predict
from .pipeline import PipelineResult, RepresentationResult, run_pipeline
from .splitting import Fold, Partition, stratified_holdout, stratified_k_fold
from .tokenizer import Tokenizer, tokenize

__all__ = [
    # Data
    "Document",
    "TokenizedDocument",
    "PipelineConfig",
    "load_corpus",
    # Errors
    "NbtextError",
    "EmptyVocabularyError",
    "VocabularyMismatchError",
    # Tokenization
    "Tokenizer",
    "tokenize",
    # Features
    "Vocabulary",
    "DocumentTermMatrix",
    "build_dtm",
    "transform",
    "ngrams",
    "bigrams",
    "tfidf",
    "inverse_document_frequency",
    "top_terms",
    # Classification
    "TrainedNaiveBayes",
    "fit",
    "predict",
    # Splitting
    "Partition",
    "Fold",
    "stratified_holdout",
    "stratified_k_fold",
    # Evaluation
    "ConfusionMatrix",
    "ClassificationMetrics",
    "evaluate",
    "HoldoutResult",
    "FoldResult",
    "CrossValidationResult",
    "holdout_evaluate",
    "cross_validate",
    # Pipeline
    "PipelineResult",
    "RepresentationResult",
    "run_pipeline",
]
