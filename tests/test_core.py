from collections import Counter
from collections.abc import Iterable, Sized

import pytest

from springkit.gs.core import (
    BeanDefinition,
    BeanRegistration,
    BeanSelectorImpl,
    Job,
    RegisteredBean,
    Runner,
    Server,
    as_interface,
    bean_selector_for,
)


class RecordingRegistration(BeanRegistration):
    def __init__(self):
        self.calls = Counter()
        self.exports = []

    def name(self):
        self.calls["name"] += 1
        return "bean"

    def type(self):
        self.calls["type"] += 1
        return int

    def value(self):
        self.calls["value"] += 1
        return 42

    def set_name(self, name):
        self.calls["set_name"] += 1

    def set_init(self, fn):
        self.calls["set_init"] += 1

    def set_destroy(self, fn):
        self.calls["set_destroy"] += 1

    def set_init_method(self, method):
        self.calls["set_init_method"] += 1

    def set_destroy_method(self, method):
        self.calls["set_destroy_method"] += 1

    def set_condition(self, *conditions):
        self.calls["set_condition"] += 1

    def set_depends_on(self, *selectors):
        self.calls["set_depends_on"] += 1

    def set_export(self, *exports):
        self.calls["set_export"] += 1
        self.exports.append(exports)

    def set_configuration(self, *c):
        self.calls["set_configuration"] += 1

    def set_caller(self, skip):
        self.calls["set_caller"] += 1

    def on_profiles(self, profiles):
        self.calls["on_profiles"] += 1


EXPECTED_CALLS = Counter(
    {
        "type": 1,
        "name": 1,
        "value": 1,
        "set_name": 1,
        "set_init": 1,
        "set_destroy": 1,
        "set_init_method": 1,
        "set_destroy_method": 1,
        "set_condition": 1,
        "set_depends_on": 1,
        "set_export": 4,
        "set_configuration": 1,
        "set_caller": 1,
        "on_profiles": 1,
    }
)


def test_as_interface():
    assert as_interface(Iterable) is Iterable
    with pytest.raises(TypeError, match="T must be interface"):
        as_interface(int)


def test_bean_selector_no_name():
    s = bean_selector_for(Iterable)
    assert s.type_and_name() == (Iterable, "")
    assert str(s) == "{Type:collections.abc.Iterable}"


def test_bean_selector_with_name():
    s = bean_selector_for(Sized, "writer")
    assert s.type_and_name() == (Sized, "writer")
    assert str(s) == "{Type:collections.abc.Sized,Name:writer}"


def test_bean_selector_any_type_omitted():
    assert str(bean_selector_for(object, "x")) == "{Name:x}"
    assert str(BeanSelectorImpl()) == "{}"


@pytest.mark.parametrize("cls", [RegisteredBean, BeanDefinition])
def test_builder_chain(cls):
    reg = RecordingRegistration()
    builder = cls(reg)
    b = (
        builder.name("a")
        .init(lambda: None)
        .init_method("init")
        .destroy(lambda: None)
        .destroy_method("destroy")
        .condition(None)
        .depends_on(None)
        .as_runner()
        .as_job()
        .as_server()
        .export(None)
        .configuration()
        .caller(0)
        .on_profiles("dev")
    )
    assert b is builder
    assert isinstance(b, cls)
    assert b.type_and_name() == (int, "bean")
    assert b.get_arg_value(None, None) == 42
    assert b.bean_registration() is reg
    assert reg.calls == EXPECTED_CALLS
    assert reg.exports == [(Runner,), (Job,), (Server,), (None,)]