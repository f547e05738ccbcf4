"""Tests for registry module."""

import unittest

from ppbuild.registry import (
    DuplicateTaskError,
    FunctionPayload,
    ShellPayload,
    Task,
    TaskRegistry,
    UnknownTaskError,
    UnsupportedPayload,
    make_payload,
)


class TestMakePayload(unittest.TestCase):
    def test_none_has_no_payload(self):
        self.assertIsNone(make_payload(None))

    def test_string_is_shell_payload(self):
        self.assertEqual(make_payload("make all"), ShellPayload("make all"))

    def test_callable_is_function_payload(self):
        def build():
            return 1

        payload = make_payload(build)
        self.assertIsInstance(payload, FunctionPayload)
        self.assertIs(payload.func, build)

    def test_lambda_is_function_payload(self):
        self.assertIsInstance(make_payload(lambda: None), FunctionPayload)

    def test_existing_payload_passes_through(self):
        payload = ShellPayload("true")
        self.assertIs(make_payload(payload), payload)

    def test_other_values_are_unsupported(self):
        for value in (["echo", "hi"], 42, {"cmd": "x"}):
            with self.subTest(value=value):
                payload = make_payload(value)
                self.assertIsInstance(payload, UnsupportedPayload)
                self.assertEqual(payload.value, value)


class TestTask(unittest.TestCase):
    def test_single_dependency_string_becomes_list(self):
        task = Task(name="build", deps="compile")
        self.assertEqual(task.deps, ["compile"])

    def test_is_file_task(self):
        self.assertTrue(Task(name="out.txt", target_file="out.txt").is_file_task)
        self.assertFalse(Task(name="build").is_file_task)

    def test_new_task_has_not_run(self):
        self.assertFalse(Task(name="build").ran)


class TestRegister(unittest.TestCase):
    def setUp(self):
        self.registry = TaskRegistry()

    def test_register_stores_task(self):
        task = self.registry.register("build", ["compile"], "make")

        self.assertIs(self.registry.lookup("build"), task)
        self.assertEqual(task.deps, ["compile"])
        self.assertEqual(task.payload, ShellPayload("make"))
        self.assertIsNone(task.target_file)

    def test_register_empty_name_is_ignored(self):
        self.assertIsNone(self.registry.register("", [], "make"))
        self.assertIsNone(self.registry.register(None, [], "make"))
        self.assertEqual(len(self.registry), 0)

    def test_duplicate_name_raises(self):
        self.registry.register("build", [], "first")

        with self.assertRaises(DuplicateTaskError) as cm:
            self.registry.register("build", [], "second")

        self.assertIn("build", str(cm.exception))

    def test_duplicate_does_not_overwrite(self):
        first = self.registry.register("build", [], "first")

        with self.assertRaises(DuplicateTaskError):
            self.registry.file("build", run="second")

        self.assertIs(self.registry.lookup("build"), first)
        self.assertEqual(first.payload, ShellPayload("first"))

    def test_forward_references_allowed(self):
        """Dependencies are not checked at definition time."""
        task = self.registry.register("all", ["not-yet-defined"])
        self.assertEqual(task.deps, ["not-yet-defined"])


class TestConveniences(unittest.TestCase):
    def setUp(self):
        self.registry = TaskRegistry()

    def test_task_with_shell_command(self):
        task = self.registry.task("test", "build", "lint", run="pytest")

        self.assertEqual(task.deps, ["build", "lint"])
        self.assertEqual(task.payload, ShellPayload("pytest"))
        self.assertFalse(task.is_file_task)

    def test_task_with_function(self):
        def compile_sources():
            return "compiled"

        task = self.registry.task("compile", run=compile_sources)

        self.assertEqual(task.payload, FunctionPayload(compile_sources))

    def test_file_sets_target_to_name(self):
        task = self.registry.file("dist/app.tar", "build", run="tar cf dist/app.tar build")

        self.assertEqual(task.target_file, "dist/app.tar")
        self.assertEqual(task.deps, ["build"])
        self.assertTrue(task.is_file_task)

    def test_group_has_no_payload(self):
        task = self.registry.group("all", "build", "test")

        self.assertIsNone(task.payload)
        self.assertEqual(task.deps, ["build", "test"])

    def test_dependency_list_then_positional_body(self):
        task = self.registry.task("link", ["compile", "assets"], "cc -o app *.o")

        self.assertEqual(task.deps, ["compile", "assets"])
        self.assertEqual(task.payload, ShellPayload("cc -o app *.o"))

    def test_file_with_dependency_list_and_function(self):
        def build():
            pass

        task = self.registry.file("app", ("main.o",), build)

        self.assertEqual(task.deps, ["main.o"])
        self.assertEqual(task.payload, FunctionPayload(build))
        self.assertEqual(task.target_file, "app")

    def test_trailing_callable_is_the_body(self):
        def compile_sources():
            pass

        task = self.registry.task("compile", "prepare", compile_sources)

        self.assertEqual(task.deps, ["prepare"])
        self.assertEqual(task.payload, FunctionPayload(compile_sources))

    def test_trailing_string_is_a_dependency(self):
        task = self.registry.task("hello", "echo hi")

        self.assertEqual(task.deps, ["echo hi"])
        self.assertIsNone(task.payload)

    def test_body_given_twice_raises(self):
        with self.assertRaises(TypeError):
            self.registry.task("build", ["compile"], "make", run="make all")
        self.assertNotIn("build", self.registry)

    def test_too_many_arguments_after_dependency_list_raises(self):
        with self.assertRaises(TypeError):
            self.registry.task("build", ["compile"], "make", "extra")

    def test_non_string_dependency_raises(self):
        with self.assertRaises(TypeError) as cm:
            self.registry.task("build", "compile", 42, run="make")

        self.assertIn("Dependencies of task 'build' must be task names", str(cm.exception))
        self.assertNotIn("build", self.registry)

    def test_group_accepts_dependency_list(self):
        task = self.registry.group("all", ["build", "test"])

        self.assertEqual(task.deps, ["build", "test"])

    def test_group_rejects_callable_dependency(self):
        with self.assertRaises(TypeError):
            self.registry.group("all", "build", print)

    def test_conveniences_ignore_empty_name(self):
        self.assertIsNone(self.registry.task("", run="x"))
        self.assertIsNone(self.registry.file("", run="x"))
        self.assertIsNone(self.registry.group(""))


class TestDescribe(unittest.TestCase):
    def setUp(self):
        self.registry = TaskRegistry()

    def test_set_then_get(self):
        self.assertEqual(self.registry.describe("build", "x"), "x")
        self.assertEqual(self.registry.describe("build"), "x")

    def test_unset_description_is_none(self):
        self.assertIsNone(self.registry.describe("build"))

    def test_overwrite(self):
        self.registry.describe("build", "old")
        self.registry.describe("build", "new")
        self.assertEqual(self.registry.describe("build"), "new")

    def test_empty_text_does_not_clear(self):
        self.registry.describe("build", "kept")
        self.assertEqual(self.registry.describe("build", ""), "kept")

    def test_task_need_not_exist(self):
        self.registry.describe("later", "Defined after its description")
        self.registry.task("later", run="true")

        self.assertEqual(self.registry.describe("later"), "Defined after its description")


class TestLookup(unittest.TestCase):
    def setUp(self):
        self.registry = TaskRegistry()
        self.registry.task("Alpha", run="true")
        self.registry.task("Beta", run="true")

    def test_list_names(self):
        self.assertEqual(self.registry.list_names(), {"Alpha", "Beta"})

    def test_lookup_missing_is_none(self):
        self.assertIsNone(self.registry.lookup("Gamma"))

    def test_get_missing_raises(self):
        with self.assertRaises(UnknownTaskError) as cm:
            self.registry.get("Gamma")
        self.assertIn("Gamma", str(cm.exception))

    def test_contains_and_len(self):
        self.assertIn("Alpha", self.registry)
        self.assertNotIn("Gamma", self.registry)
        self.assertEqual(len(self.registry), 2)


if __name__ == "__main__":
    unittest.main()
