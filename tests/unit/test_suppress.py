"""Unit tests for default suppression."""

import pytest

from pretender.suppress import DefaultSuppression, provider_suppression, skips_default


class Resource:
    """Minimal object with a set_default(attr) hook."""

    def __init__(self, suppression=None):
        self.values = {}
        self.calls = []
        self.suppression = suppression

    def _set_default(self, attr):
        self.calls.append(attr)
        self.values[attr] = f"default-{attr}"


class TestDefaultSuppression:
    """Tests for the suppression switch."""

    def test_starts_off(self):
        assert not DefaultSuppression().is_suppressed

    def test_suppress_and_unsuppress(self):
        switch = DefaultSuppression()
        switch.suppress()
        assert switch.is_suppressed
        switch.unsuppress()
        assert not switch.is_suppressed

    def test_skips_only_named_attribute(self):
        switch = DefaultSuppression("provider")
        switch.suppress()
        assert switch.skips("provider")
        assert not switch.skips("ensure")

    def test_suppressed_restores_prior_flag(self):
        switch = DefaultSuppression()
        with pytest.raises(RuntimeError):
            with switch.suppressed():
                assert switch.is_suppressed
                raise RuntimeError
        assert not switch.is_suppressed

        switch.suppress()
        with switch.suppressed():
            pass
        assert switch.is_suppressed


class TestSkipsDefault:
    """Tests for decorated set_default methods."""

    def test_instance_decorator(self):
        switch = DefaultSuppression("provider")

        class Type(Resource):
            set_default = switch.skips_default(Resource._set_default)

        resource = Type()
        with switch.suppressed():
            resource.set_default("provider")
            resource.set_default("ensure")
        assert resource.calls == ["ensure"]
        assert "provider" not in resource.values

        resource.set_default("provider")
        assert resource.values["provider"] == "default-provider"

    def test_module_decorator_uses_shared_switch(self):
        class Type(Resource):
            @skips_default
            def set_default(self, attr):
                return self._set_default(attr)

        resource = Type()
        with provider_suppression.suppressed():
            assert resource.set_default("provider") is None
        assert resource.calls == []

    def test_module_decorator_with_explicit_switch(self):
        switch = DefaultSuppression("loglevel")

        class Type(Resource):
            @skips_default(suppression=switch)
            def set_default(self, attr):
                return self._set_default(attr)

        resource = Type()
        with switch.suppressed():
            resource.set_default("loglevel")
            resource.set_default("provider")
        assert resource.calls == ["provider"]
