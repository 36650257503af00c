from erb_to_phlex.pipeline import ConverterConfig, FormatterConfig


class TestConverterConfig:
    """Defaults and dict conversion"""

    def test_defaults(self):
        config = ConverterConfig()
        assert config.component is False
        assert config.component_name == "Component"
        assert config.parent_component == "Phlex::HTML"
        assert config.whitespace is True
        assert config.svg_param == "s"
        assert config.template_name == "view_template"
        assert config.raise_errors is False
        assert config.formatter == FormatterConfig()

    def test_from_dict(self):
        config = ConverterConfig.from_dict(
            {
                "component": True,
                "component_name": "Card",
                "whitespace": False,
                "formatter": {"enabled": True, "line_length": 100},
            }
        )
        assert config.component is True
        assert config.component_name == "Card"
        assert config.whitespace is False
        assert config.formatter.enabled is True
        assert config.formatter.line_length == 100
        assert config.formatter.command == "stree"

    def test_from_dict_ignores_unknown_keys(self):
        config = ConverterConfig.from_dict({"no_such_option": 1})
        assert not hasattr(config, "no_such_option")

    def test_max_line_length(self):
        config = ConverterConfig.from_dict({"max_line_length": 120})
        assert config.max_line_length == 120
        assert config.formatter.line_length == 120

    def test_round_trip(self):
        config = ConverterConfig(component=True, svg_param="svg", blank_line_between_children=True)
        assert ConverterConfig.from_dict(config.to_dict()) == config

    def test_safe_constant_names(self):
        config = ConverterConfig(component_name="1Card")
        assert config.component_name == "A1Card"
        assert ConverterConfig.from_dict({"parent_component": "2Base"}).parent_component == "A2Base"
