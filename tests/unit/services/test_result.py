"""Unit tests for ServiceResult and catch_faults."""

import pytest

from coursemanager.services import ErrorKind, ServiceResult, catch_faults


@pytest.mark.unit
class TestServiceResult:
    """Tests for the result envelope."""

    def test_ok_defaults(self) -> None:
        result = ServiceResult.ok()
        assert result.success
        assert result.message == "Operation completed successfully"
        assert result.data is None
        assert result.error is None

    def test_ok_with_data_and_message(self) -> None:
        result = ServiceResult.ok([1, 2], "Loaded")
        assert result.data == [1, 2]
        assert result.message == "Loaded"

    def test_fail_defaults_to_validation(self) -> None:
        result = ServiceResult.fail("Bad input")
        assert not result.success
        assert result.message == "Bad input"
        assert result.error == ErrorKind.VALIDATION
        assert result.data is None

    def test_fail_with_kind(self) -> None:
        result = ServiceResult.fail("Missing", ErrorKind.NOT_FOUND)
        assert result.error == ErrorKind.NOT_FOUND
        assert result.error == "not_found"


@pytest.mark.unit
class TestCatchFaults:
    """Tests for the catch_faults decorator."""

    def test_passes_results_through(self) -> None:
        @catch_faults("loading things")
        def load() -> ServiceResult[int]:
            return ServiceResult.ok(3)

        assert load().data == 3

    def test_converts_exception_to_failure(self, caplog: pytest.LogCaptureFixture) -> None:
        @catch_faults("loading things")
        def load() -> ServiceResult[int]:
            raise RuntimeError("disk unplugged")

        result = load()

        assert not result.success
        assert result.message == "Error loading things: disk unplugged"
        assert result.error == ErrorKind.INFRASTRUCTURE
        assert "Error loading things" in caplog.text

    def test_preserves_function_metadata(self) -> None:
        @catch_faults("loading things")
        def load() -> ServiceResult[None]:
            """Load the things."""
            return ServiceResult.ok()

        assert load.__name__ == "load"
        assert load.__doc__ == "Load the things."
