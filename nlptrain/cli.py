#!/usr/bin/env python3
"""
Command line front end for training and evaluating models.

    python -m nlptrain.cli train tokenizer --data en-token.train --model en-token.bin
    python -m nlptrain.cli train parser --data en-parser.train --head-rules head_rules --model en-parser.bin
    python -m nlptrain.cli train namefinder --data en-ner.train --model en-ner.bin --algorithm PERCEPTRON --cutoff 0
    python -m nlptrain.cli evaluate pos --model en-pos.bin --data en-pos.test
"""

import argparse
import sys
from typing import List, Optional

from . import evaluation, train
from .config import ALGORITHMS, DEFAULT_LANGUAGE, MAXENT
from .dictionary import build_posdictionary
from .errors import TrainingError
from .models import (
    ChunkerModel,
    DoccatModel,
    POSModel,
    SentenceModel,
    TokenizerModel,
    TokenNameFinderModel,
)
from .persistence import load_model, write_model

FAMILIES = ["tokenizer", "sentdetect", "pos", "namefinder", "chunker", "parser", "doccat"]

EVALUATORS = {
    "tokenizer": (TokenizerModel, evaluation.evaluate_tokenizer),
    "sentdetect": (SentenceModel, evaluation.evaluate_sentence_detector),
    "pos": (POSModel, evaluation.evaluate_pos_tagger),
    "chunker": (ChunkerModel, evaluation.evaluate_chunker),
    "namefinder": (TokenNameFinderModel, evaluation.evaluate_name_finder),
    "doccat": (DoccatModel, evaluation.evaluate_document_categorizer),
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nlptrain",
        description="Train and evaluate NLP models on plain-text corpora"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    train_cmd = commands.add_parser("train", help="Train a model and write it to disk")
    train_cmd.add_argument("family", choices=FAMILIES)
    train_cmd.add_argument("--data", required=True, metavar="FILE",
                           help="Training corpus in the family's format")
    train_cmd.add_argument("--model", required=True, metavar="FILE",
                           help="Where to write the trained model")
    train_cmd.add_argument("--lang", default=DEFAULT_LANGUAGE,
                           help="Language code (default: %(default)s)")
    train_cmd.add_argument("--iterations", type=int, default=None,
                           help="Training iterations (default: 100)")
    train_cmd.add_argument("--cutoff", type=int, default=None,
                           help="Feature cutoff (default: 5, doccat: 1)")
    train_cmd.add_argument("--head-rules", metavar="FILE",
                           help="Head rules file (parser only)")
    train_cmd.add_argument("--tag-dict", metavar="FILE",
                           help="POS dictionary file (pos only)")
    train_cmd.add_argument("--entity-type", default="default",
                           help="Type of untyped names (namefinder only)")
    train_cmd.add_argument("--algorithm", choices=ALGORITHMS, default=MAXENT,
                           help="Training algorithm (namefinder only)")
    train_cmd.add_argument("--verbose", action="store_true",
                           help="Show progress and trainer output")

    eval_cmd = commands.add_parser("evaluate", help="Evaluate a model on held-out data")
    eval_cmd.add_argument("family", choices=sorted(EVALUATORS))
    eval_cmd.add_argument("--model", required=True, metavar="FILE")
    eval_cmd.add_argument("--data", required=True, metavar="FILE")
    return parser


def _tuning(args) -> dict:
    """Iterations and cutoff given on the command line, leaving the rest to defaults."""
    kwargs = {}
    if args.iterations is not None:
        kwargs['iterations'] = args.iterations
    if args.cutoff is not None:
        kwargs['cutoff'] = args.cutoff
    return kwargs


def run_train(args, parser: argparse.ArgumentParser):
    """Train the requested family and write the model to --model."""
    family = args.family
    common = {'language': args.lang, 'verbose': args.verbose}

    if family == "tokenizer":
        model = train.train_tokenizer(args.data, **common, **_tuning(args))
    elif family == "sentdetect":
        model = train.train_sentence_detector(args.data, **common)
    elif family == "pos":
        tag_dictionary = build_posdictionary(args.tag_dict) if args.tag_dict else None
        model = train.train_pos_tagger(args.data, tag_dictionary=tag_dictionary,
                                       **common, **_tuning(args))
    elif family == "namefinder":
        model = train.train_name_finder(args.data, entity_type=args.entity_type,
                                        classifier=args.algorithm,
                                        **common, **_tuning(args))
    elif family == "chunker":
        model = train.train_treebank_chunker(args.data, **common, **_tuning(args))
    elif family == "parser":
        if not args.head_rules:
            parser.error("--head-rules is required to train a parser")
        model = train.train_treebank_parser(args.data, args.head_rules,
                                            **common, **_tuning(args))
    else:
        model = train.train_document_categorization(args.data, **common, **_tuning(args))

    write_model(model, args.model)
    print(f"✓ Saved {model.family} model to {args.model}")


def run_evaluate(args):
    """Load a model, score it on --data and print one line per metric."""
    model_class, evaluate = EVALUATORS[args.family]
    model = load_model(args.model, expected=model_class)
    scores = evaluate(model, args.data)
    print(f"Evaluation of {args.model} on {args.data}:")
    for name, value in scores.items():
        if isinstance(value, float):
            print(f"  • {name:10s}: {value:.4f}")
        else:
            print(f"  • {name:10s}: {value}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "train":
            run_train(args, parser)
        else:
            run_evaluate(args)
    except TrainingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
