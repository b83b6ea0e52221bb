"""Tests for the structural Dart parser."""

import textwrap

import pytest

from layerlint.exceptions import ParsingError
from layerlint.scanning.dart import DartParser
from layerlint.scanning.syntax import UnitKind


def _parse(source, path="lib/features/auth/cubits/login_cubit.dart"):
    return DartParser().parse(textwrap.dedent(source).lstrip("\n"), path)


def _decls(source):
    return {d.name: d for d in _parse(source).declarations}


class TestDeclarationKinds:
    """Every supported top-level declaration is recognized."""

    def test_plain_and_modified_classes(self):
        decls = _decls(
            """
            class Plain {}
            abstract class Abstract {}
            sealed class Sealed {}
            abstract interface class Contract {}
            base class Base {}
            final class Closed {}
            mixin class MixinClass {}
            """
        )
        assert decls["Plain"].kind is UnitKind.CLASS
        assert decls["Abstract"].kind is UnitKind.ABSTRACT_CLASS
        assert decls["Sealed"].kind is UnitKind.ABSTRACT_CLASS
        assert decls["Contract"].kind is UnitKind.ABSTRACT_CLASS
        assert decls["Base"].kind is UnitKind.CLASS
        assert decls["Closed"].kind is UnitKind.CLASS
        assert decls["MixinClass"].kind is UnitKind.CLASS

    def test_mixin_enum_extension(self):
        decls = _decls(
            """
            mixin Loggable on Object {}
            base mixin Tracked {}
            enum Status { idle, loading }
            extension StringX on String {}
            extension type UserId(int value) {}
            extension on int {}
            """
        )
        assert decls["Loggable"].kind is UnitKind.MIXIN
        assert decls["Tracked"].kind is UnitKind.MIXIN
        assert decls["Status"].kind is UnitKind.ENUM
        assert decls["StringX"].kind is UnitKind.EXTENSION
        assert decls["UserId"].kind is UnitKind.EXTENSION
        assert len(decls) == 5

    def test_typedefs(self):
        decls = _decls(
            """
            typedef Json = Map<String, dynamic>;
            typedef void LegacyCallback(int value);
            """
        )
        assert decls["Json"].kind is UnitKind.TYPEDEF
        assert decls["LegacyCallback"].kind is UnitKind.TYPEDEF

    def test_functions_and_getters(self):
        decls = _decls(
            """
            void main() {
              runApp();
            }
            int add(int a, int b) => a + b;
            T identity<T>(T value) => value;
            Future<void> load() async {}
            String get greeting => 'hi';
            """
        )
        assert set(decls) == {"main", "add", "identity", "load", "greeting"}
        assert all(d.kind is UnitKind.FUNCTION for d in decls.values())

    def test_function_and_record_return_types(self):
        decls = _decls(
            """
            void Function(int) makeHandler(Foo foo) {
              return (x) {};
            }
            void Function() buildCallback() => () {};
            (int, String) pair() => (1, 'a');
            void Function() get onTap => () {};
            """
        )
        assert set(decls) == {"makeHandler", "buildCallback", "pair", "onTap"}
        assert [r.name for r in decls["makeHandler"].references] == ["Foo", "Function"]

    def test_variables_are_not_units(self):
        decls = _decls(
            """
            final counter = 0;
            const items = [1, 2];
            final handlers = {'a': () {}};
            late String name;
            external void nativeCall();
            """
        )
        assert decls == {}


class TestDirectives:
    """Imports are skipped; part directives are recorded."""

    def test_part_directives(self):
        syntax = _parse(
            """
            import 'package:flutter/material.dart';
            export 'src/api.dart';
            part 'login_cubit_components.dart';
            part 'login_cubit.g.dart';

            class LoginCubit {}
            """
        )
        assert syntax.parts == ("login_cubit_components.dart", "login_cubit.g.dart")
        assert syntax.part_of is None
        assert [d.name for d in syntax.declarations] == ["LoginCubit"]

    def test_part_of_uri(self):
        syntax = _parse("part of 'login_cubit.dart';\n\nclass _Helper {}\n")
        assert syntax.part_of == "login_cubit.dart"

    def test_part_of_library_name(self):
        syntax = _parse("part of app.auth;\n")
        assert syntax.part_of == "app.auth"

    def test_line_count(self):
        syntax = _parse("class A {}\n\n\nclass B {}\n")
        assert syntax.line_count == 4


class TestSpansAndReferences:
    """Line spans and candidate references per declaration."""

    def test_span_includes_annotations(self):
        decls = _decls(
            """
            import 'package:meta/meta.dart';

            @immutable
            @JsonSerializable(explicitToJson: true)
            class UserDTO {
              final String id;
            }
            """
        )
        assert decls["UserDTO"].start_line == 3
        assert decls["UserDTO"].end_line == 7

    def test_references_are_type_shaped_identifiers(self):
        decls = _decls(
            """
            class LoginCubit extends Cubit<LoginState> {
              final AuthRepository repository;

              LoginCubit(this.repository) : super(LoginState.initial());

              void log() {
                // UserDTO in a comment is not a reference
                print('Welcome Home');
              }
            }
            """
        )
        refs = decls["LoginCubit"].references
        assert [(r.name, r.line) for r in refs] == [
            ("Cubit", 1),
            ("LoginState", 1),
            ("AuthRepository", 2),
        ]

    def test_private_names_are_candidates(self):
        decls = _decls(
            """
            class LoginScreen extends StatefulWidget {
              State<LoginScreen> createState() => _LoginScreenState();
            }
            """
        )
        names = [r.name for r in decls["LoginScreen"].references]
        assert "_LoginScreenState" in names
        assert "LoginScreen" not in names

    def test_each_name_reported_once_at_first_line(self):
        decls = _decls(
            """
            class A {
              B first;
              B second;
            }
            """
        )
        assert [(r.name, r.line) for r in decls["A"].references] == [("B", 2)]


class TestMalformedInput:
    def test_unbalanced_braces_raise(self):
        with pytest.raises(ParsingError) as exc:
            _parse("class Broken {\n  void f() {\n}\n")
        assert exc.value.language == "dart"
