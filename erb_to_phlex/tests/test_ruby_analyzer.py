"""
Tests for name classification of embedded Ruby.
"""

from __future__ import annotations

import pytest

from erb_to_phlex.pipeline.analyzer import NameClassification, RubyAnalyzer, RubyParser
from erb_to_phlex.pipeline.analyzer.known_helpers import ROUTES_MODULE, rails_helper_module
from erb_to_phlex.pipeline.codec import ErbTransformer
from erb_to_phlex.pipeline.config import ConverterConfig
from erb_to_phlex.pipeline.errors import EmbeddedCodeParseError
from erb_to_phlex.pipeline.markup import parse_markup


def analyze_template(source: str, **config) -> NameClassification:
    document = parse_markup(ErbTransformer(source).transform())
    return RubyAnalyzer(ConverterConfig.from_dict(config)).analyze(document)


def analyze_ruby(code: str, allow_output_helpers: bool = True) -> NameClassification:
    return RubyAnalyzer().analyze_ruby(code, allow_output_helpers)


class TestRubyParser:
    def test_valid_code(self):
        tree = RubyParser().parse("@user.name")
        assert tree.root_node.type == "program"
        assert not tree.root_node.has_error

    def test_invalid_code(self):
        with pytest.raises(EmbeddedCodeParseError) as excinfo:
            RubyParser().parse("if foo(")
        assert excinfo.value.source == "if foo("


class TestClassification:
    def test_instance_variables_are_fields(self):
        result = analyze_ruby("@firstname\n@lastname")
        assert result.fields == {"firstname", "lastname"}
        assert result.locals == set()

    def test_free_variables_are_locals(self):
        result = analyze_ruby("some_local")
        assert result.locals == {"some_local"}

    def test_receiver_names(self):
        result = analyze_ruby("@user.name\nitem.title")
        assert result.fields == {"user"}
        assert result.locals == {"item"}
        assert {"user", "item"} <= result.calls
        assert "name" not in result.locals
        assert "title" not in result.locals

    def test_constants(self):
        result = analyze_ruby("render SomeView.new\nTime.now")
        assert result.consts == {"SomeView", "Time"}

    def test_interpolated_strings(self):
        result = analyze_ruby('"#{some_local}_text"')
        assert result.locals == {"some_local"}

    def test_block_parameters_are_bound(self):
        result = analyze_ruby("@articles.each do |article|\narticle.title\nend")
        assert result.fields == {"articles"}
        assert result.locals == set()
        assert "article" in result.bound

    def test_brace_block_parameters_are_bound(self):
        result = analyze_ruby("items.map { |item| item.name }")
        assert result.locals == {"items"}

    def test_block_parameters_do_not_leak(self):
        result = analyze_ruby("items.each do |item|\nitem\nend\nitem")
        assert result.locals == {"items", "item"}

    def test_assignments_bind(self):
        result = analyze_ruby("total = price * 2\ntotal")
        assert result.locals == {"price"}
        assert "total" in result.bound

    def test_multiple_assignment_binds(self):
        result = analyze_ruby("a, b = pair\na + b")
        assert result.locals == {"pair"}

    def test_assigned_instance_variable_is_field(self):
        result = analyze_ruby("@greeting = capture do\nTime.now\nend")
        assert result.fields == {"greeting"}
        assert result.consts == {"Time"}
        assert result.output_helpers == set()

    def test_for_loop_binds(self):
        result = analyze_ruby("for row in rows\nrow\nend")
        assert result.locals == {"rows"}

    def test_rescue_variable_binds(self):
        result = analyze_ruby("begin\nrisky\nrescue => error\nerror.message\nend")
        assert result.locals == {"risky"}

    def test_lambda_parameters_are_bound(self):
        result = analyze_ruby("formatter = ->(value) { value.upcase }")
        assert result.locals == set()

    def test_yield(self):
        result = analyze_ruby("yield\nfoo.value")
        assert result.locals == {"foo"}


class TestHelpers:
    def test_statement_call_is_output_helper(self):
        result = analyze_ruby("foo(1)")
        assert result.output_helpers == {"foo"}
        assert result.value_helpers == set()

    def test_conditional_call_is_value_helper(self):
        result = analyze_ruby("if foo?\nbar\nend")
        assert result.value_helpers == {"foo?"}
        assert result.output_helpers == set()

    def test_output_and_value_helpers_never_overlap(self):
        result = analyze_ruby("foo(1)\nif foo(2)\nbar\nend")
        assert result.registered_output_helpers == ["foo"]
        assert result.registered_value_helpers == []

    def test_argument_call_is_value_helper(self):
        result = analyze_ruby("some_caller(some_helper(1))")
        assert result.output_helpers == {"some_caller"}
        assert result.value_helpers == {"some_helper"}

    def test_calls_inside_if_body(self):
        result = analyze_ruby("if should_show?\npretty_print(@user)\nanother_helper(1)\nend")
        assert result.output_helpers == {"another_helper", "pretty_print"}
        assert result.value_helpers == {"should_show?"}
        assert result.fields == {"user"}

    def test_modifier(self):
        result = analyze_ruby("yield if foo?")
        assert result.value_helpers == {"foo?"}

    def test_modifier_body_is_statement(self):
        result = analyze_ruby("notify(1) if ready?")
        assert result.output_helpers == {"notify"}
        assert result.value_helpers == {"ready?"}

    def test_calls_inside_blocks(self):
        result = analyze_ruby("items.each do |item|\nrender_item(item)\nend")
        assert result.output_helpers == {"render_item"}

    def test_output_helpers_disabled(self):
        result = analyze_ruby("some_helper(with: :args)", allow_output_helpers=False)
        assert result.value_helpers == {"some_helper"}
        assert result.output_helpers == set()

    def test_phlex_builtins_are_ignored(self):
        result = analyze_ruby("render Card.new\nplain 'x'\ncapture do\nend")
        assert result.output_helpers == set()
        assert result.value_helpers == set()
        assert result.locals == set()

    def test_rails_helpers_are_included(self):
        result = analyze_ruby('link_to "Home", root_path')
        assert result.output_helpers == set()
        assert result.locals == set()
        assert result.includes == {"Phlex::Rails::Helpers::LinkTo", ROUTES_MODULE}

    def test_route_helper_on_receiver(self):
        result = analyze_ruby("Router.user_path(user)")
        assert result.consts == {"Router"}
        assert result.locals == {"user"}
        assert result.includes == {ROUTES_MODULE}

    @pytest.mark.parametrize(
        "name,module",
        [
            ("link_to", "Phlex::Rails::Helpers::LinkTo"),
            ("dom_id", "Phlex::Rails::Helpers::DOMID"),
            ("csrf_meta_tags", "Phlex::Rails::Helpers::CSRFMetaTags"),
            ("javascript_include_tag", "Phlex::Rails::Helpers::JavascriptIncludeTag"),
            ("t", "Phlex::Rails::Helpers::T"),
            ("edit_user_url", ROUTES_MODULE),
            ("some_helper", None),
        ],
    )
    def test_rails_helper_module(self, name, module):
        assert rails_helper_module(name) == module


class TestTemplateAnalysis:
    def test_fragments_are_joined(self):
        result = analyze_template(
            """
            <% if show_company && @company %>
              <%= @company.name %>
            <% end %>
            <%= some_local %>
            """
        )
        assert result.fields == {"company"}
        assert result.locals == {"show_company", "some_local"}

    def test_comments_are_ignored(self):
        result = analyze_template("<div><%# not_a_local %></div>")
        assert result.locals == set()

    def test_attribute_values(self):
        result = analyze_template('<div class="<%= classes %> <%= @extra %>"></div>')
        assert result.locals == {"classes"}
        assert result.fields == {"extra"}

    def test_attribute_helpers_are_value_helpers(self):
        result = analyze_template('<div class="<%= some_helper(with: :args) %>"></div>')
        assert result.value_helpers == {"some_helper"}
        assert result.output_helpers == set()

    def test_unparseable_template_falls_back_to_fragments(self):
        result = analyze_template("<% if broken( %><%= @user.name %>")
        assert result.fields == {"user"}

    def test_unparseable_template_strict(self):
        with pytest.raises(EmbeddedCodeParseError):
            analyze_template("<% if broken( %><%= @user.name %>", raise_errors=True)

    def test_clause_keywords_are_not_locals(self):
        result = analyze_template("<% if ok( %><p>x</p><% else %><%= name %><% end %>")
        assert result.locals == {"name"}
        assert result.parameters == ["name"]

    def test_attribute_fragments_are_joined(self):
        result = analyze_template('<div class="a <% if active %>b<% end %>"></div>')
        assert result.locals == {"active"}

    def test_every_attribute_value_is_analyzed(self):
        result = analyze_template('<div class="<% if wide %>w<% end %>" id="<%= dom_id %>"></div>')
        assert result.locals == {"wide", "dom_id"}

    def test_unparseable_attribute_strict(self):
        with pytest.raises(EmbeddedCodeParseError):
            analyze_template('<div class="<% if broken( %>b<% end %>"></div>', raise_errors=True)

    def test_unparseable_attribute_falls_back_to_fragments(self):
        result = analyze_template('<div class="<% if broken( %><%= @klass %><% end %>"></div>')
        assert result.fields == {"klass"}
        assert result.locals == set()

    def test_parameters_and_accessors(self):
        result = analyze_template("<h1><%= @user.name %></h1><p><%= name %></p>")
        assert result.parameters == ["name", "user"]
        assert result.accessors == ["name"]
