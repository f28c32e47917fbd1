import pytest

from signalr_hub.value import InvokeResult, SignalRValue, ValueType


def test_default_is_null():
    value = SignalRValue()
    assert value.type is ValueType.NULL
    assert value.to_python() is None


def test_none_becomes_null():
    assert SignalRValue.of(None).type is ValueType.NULL


def test_bool_is_boolean_not_number():
    value = SignalRValue.of(True)
    assert value.type is ValueType.BOOLEAN
    assert value.to_python() is True


@pytest.mark.parametrize("raw", [3, -7, 2.5, 0])
def test_numbers_are_stored_as_float(raw):
    value = SignalRValue.of(raw)
    assert value.type is ValueType.NUMBER
    assert isinstance(value.value, float)
    assert value.to_python() == raw


def test_string():
    value = SignalRValue.of("hello")
    assert value.type is ValueType.STRING
    assert value.to_python() == "hello"


def test_binary_from_bytearray():
    value = SignalRValue.of(bytearray(b"\x00\x01"))
    assert value.type is ValueType.BINARY
    assert value.to_python() == b"\x00\x01"


def test_array_and_object_nest():
    raw = {"a": [1, "x", None], "b": {"c": False}}
    value = SignalRValue.of(raw)
    assert value.type is ValueType.OBJECT
    assert value.value["a"].type is ValueType.ARRAY
    assert value.value["b"].value["c"].type is ValueType.BOOLEAN
    assert value.to_python() == raw


def test_tuple_becomes_array():
    value = SignalRValue.of((1, 2))
    assert value.type is ValueType.ARRAY
    assert value.to_python() == [1, 2]


def test_existing_value_is_returned_unchanged():
    value = SignalRValue.of("x")
    assert SignalRValue.of(value) is value


def test_equal_inputs_give_equal_values():
    assert SignalRValue.of([1, "a"]) == SignalRValue.of((1.0, "a"))


def test_unsupported_type_raises():
    with pytest.raises(TypeError):
        SignalRValue.of(object())


def test_non_string_key_raises():
    with pytest.raises(TypeError):
        SignalRValue.of({1: "a"})


def test_invoke_result_error():
    result = InvokeResult.error("boom")
    assert result.has_error() is True
    assert result.error_message == "boom"
    assert result.type is ValueType.NULL


def test_invoke_result_from_value_has_no_error():
    result = InvokeResult.of(SignalRValue.of("done"))
    assert result.has_error() is False
    assert result.error_message == ""
    assert result.to_python() == "done"


def test_invoke_result_of_plain_data():
    result = InvokeResult.of([1, 2])
    assert isinstance(result, InvokeResult)
    assert result.to_python() == [1, 2]