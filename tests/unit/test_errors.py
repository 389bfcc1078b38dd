"""
Error Taxonomy Unit Tests
Tests for merkletree/schemas/errors.py
"""
import pytest

from merkletree.schemas.errors import (
    ConfigurationException,
    DataNotFoundException,
    EmptyInputException,
    ErrorCodes,
    InvalidPollardHeightException,
    MalformedProofException,
    MerkleError,
    MerkleTreeException,
    TreeEncodingException,
    UnknownHashTypeException,
)


class TestExceptionCodes:
    """Each exception carries its stable code."""

    @pytest.mark.parametrize(
        "exc,code",
        [
            (EmptyInputException(), ErrorCodes.EMPTY_INPUT),
            (DataNotFoundException(), ErrorCodes.DATA_NOT_FOUND),
            (InvalidPollardHeightException("too high", height=5, depth=2), ErrorCodes.INVALID_POLLARD_HEIGHT),
            (MalformedProofException("bad"), ErrorCodes.MALFORMED_PROOF),
            (UnknownHashTypeException(hash_type="md5"), ErrorCodes.UNKNOWN_HASH_TYPE),
            (TreeEncodingException("bad"), ErrorCodes.TREE_ENCODING_ERROR),
            (ConfigurationException("bad", field_path="tree"), ErrorCodes.CONFIGURATION_ERROR),
        ],
    )
    def test_code_and_base_class(self, exc, code):
        """Codes are set and every exception is a MerkleTreeException."""
        assert exc.code == code
        assert isinstance(exc, MerkleTreeException)
        assert exc.retryable is False

    def test_default_messages(self):
        """Default messages match the documented wording."""
        assert str(EmptyInputException()) == "tree must have at least 1 piece of data"
        assert str(DataNotFoundException()) == "data not found"
        assert str(UnknownHashTypeException()) == "cannot parse hash type"

    def test_details(self):
        """Keyword context ends up in details."""
        exc = InvalidPollardHeightException("too high", height=5, depth=2)

        assert exc.details == {"height": 5, "depth": 2}
        assert DataNotFoundException(leaf_index=7).details == {"leaf_index": 7}


class TestErrorModel:
    """Conversion between exceptions and MerkleError."""

    def test_to_error_model(self):
        """Exceptions convert to the pydantic model."""
        model = DataNotFoundException(leaf_index=3).to_error_model()

        assert isinstance(model, MerkleError)
        assert model.code == ErrorCodes.DATA_NOT_FOUND
        assert model.details == {"leaf_index": 3}
        assert model.model_dump()["message"] == "data not found"

    def test_round_trip(self):
        """A model converts back to an equivalent exception."""
        exc = MalformedProofException("no indices specified").to_error_model().to_exception()

        assert isinstance(exc, MerkleTreeException)
        assert exc.code == ErrorCodes.MALFORMED_PROOF
        assert exc.message == "no indices specified"

    def test_model_rejects_extra_fields(self):
        """MerkleError forbids unknown fields."""
        with pytest.raises(ValueError):
            MerkleError(code="X", message="y", unexpected=True)

    def test_repr(self):
        """repr shows class, code and message."""
        assert repr(EmptyInputException()) == (
            "EmptyInputException(code='EMPTY_INPUT', "
            "message='tree must have at least 1 piece of data')"
        )
