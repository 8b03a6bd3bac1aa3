"""
Persistence: Writing trained models to disk and reading them back.

Models are stored with pickle. A failed write may leave a partial file
behind; removing it is up to the caller.
"""

import os
import pickle
from pathlib import Path
from typing import BinaryIO, Optional, Type, Union

from .errors import ResourceUnreadable, SerializationFailure
from .models import BaseModel

Sink = Union[str, os.PathLike, BinaryIO]


def write_model(model: BaseModel, sink: Sink):
    """
    Write a model to a file path or a writable binary stream.

    Args:
        model: Any trained model
        sink: Output path or binary stream

    Raises:
        SerializationFailure: If the sink cannot be written or the model
            cannot be pickled
    """
    if not isinstance(model, BaseModel):
        raise SerializationFailure(
            f"not a trained model: {type(model).__name__}")
    try:
        if isinstance(sink, (str, os.PathLike)):
            path = Path(sink)
            with open(path, 'wb') as f:
                model.serialize(f)
        else:
            model.serialize(sink)
    except (OSError, pickle.PicklingError, AttributeError, TypeError) as e:
        raise SerializationFailure(f"cannot write {model.family} model: {e}") from e


def load_model(source: Sink, expected: Optional[Type[BaseModel]] = None) -> BaseModel:
    """
    Read a model written by write_model.

    Args:
        source: Input path or binary stream
        expected: Model class the result must be an instance of

    Returns:
        The loaded model

    Raises:
        ResourceUnreadable: If the source cannot be read or unpickled
        SerializationFailure: If the source holds no model, or a model of
            another family than expected
    """
    try:
        if isinstance(source, (str, os.PathLike)):
            with open(source, 'rb') as f:
                model = pickle.load(f)
        else:
            model = pickle.load(source)
    except (OSError, EOFError, pickle.UnpicklingError, ImportError,
            AttributeError, ValueError, IndexError, KeyError) as e:
        raise ResourceUnreadable(f"cannot read model: {e}") from e

    expected = expected or BaseModel
    if not isinstance(model, expected):
        raise SerializationFailure(
            f"expected a {expected.__name__}, found {type(model).__name__}")
    return model
