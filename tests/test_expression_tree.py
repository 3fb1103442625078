import unittest

from unitcalc_pkg.evaluator import Evaluator
from unitcalc_pkg.expression_tree import NodeState
from unitcalc_pkg.expression_tree import build_expression
from unitcalc_pkg.number import NumberValue
from unitcalc_pkg.types import ErrorKind
from unitcalc_pkg.types import MessageList
from unitcalc_pkg.utils.cursor import TextCursor
from unitcalc_pkg.variables import VariableStore


class TreeTestCase(unittest.TestCase):
    def setUp(self):
        self.store = VariableStore()
        self.messages = MessageList()

    def build(self, text, seed=None):
        return build_expression(TextCursor(text), self.store, self.messages, seed=seed)

    def run_nodes(self, nodes):
        stack = []
        ok = Evaluator(self.store, self.messages).run_all(nodes, stack)
        return ok, stack


class TestTreeBuilder(TreeTestCase):
    def test_simple_binary(self):
        nodes = self.build("1+2")
        self.assertEqual(len(nodes), 1)
        node = nodes[0]
        self.assertEqual(node.operator.name, "add")
        self.assertEqual([v.value for v in node.prior], [1])
        self.assertEqual([v.value for v in node.params], [2])
        self.assertEqual(node.state, NodeState.PARSED)

    def test_chain_is_left_to_right(self):
        nodes = self.build("1+2-3")
        self.assertEqual(len(nodes), 2)
        self.assertEqual(nodes[1].operator.name, "sub")
        self.assertEqual(nodes[1].prior, [])
        self.assertEqual([v.value for v in nodes[1].params], [3])

    def test_minus_after_term_is_subtraction(self):
        nodes = self.build("45-6")
        self.assertEqual(nodes[0].operator.name, "sub")
        self.assertEqual(nodes[0].params[0].value, 6)

    def test_negative_literal_after_operator(self):
        nodes = self.build("1+-2")
        self.assertEqual(nodes[0].operator.name, "add")
        self.assertEqual(nodes[0].params[0].value, -2)

    def test_implicit_multiplication(self):
        nodes = self.build("3.4 5.3")
        self.assertEqual(len(nodes), 1)
        self.assertEqual(nodes[0].operator.name, "mul")
        self.assertEqual(nodes[0].state, NodeState.PARSED)

    def test_number_followed_by_name(self):
        nodes = self.build("2pi")
        self.assertEqual(nodes[0].operator.name, "mul")
        self.assertEqual(nodes[0].params[0].name, "pi")

    def test_postfix_function(self):
        nodes = self.build("30 sin")
        self.assertEqual(nodes[0].operator.name, "sin")
        self.assertEqual(nodes[0].state, NodeState.FUNCTION)

    def test_function_call_group(self):
        nodes = self.build("sin(30)")
        self.assertEqual(len(nodes), 1)
        node = nodes[0]
        self.assertEqual(node.operator.name, "sin")
        self.assertEqual(len(node.children), 1)
        self.assertEqual(node.children[-1].state, NodeState.CLOSE_PAREN)

    def test_group_nests_under_bound_operator(self):
        nodes = self.build("2*(3+4)*5")
        self.assertEqual(len(nodes), 2)
        self.assertEqual(nodes[0].state, NodeState.FUNCTION)
        self.assertEqual(len(nodes[0].children), 1)

    def test_conversion_target(self):
        nodes = self.build("25C::F")
        self.assertEqual(nodes[0].operator.name, "convert")
        self.assertEqual(nodes[0].params[0].unit.key, "F")

    def test_inline_assignment_builds_nothing(self):
        nodes = self.build("y=3.2")
        self.assertEqual(nodes, [])
        self.assertEqual(self.store.lookup("y").value, 3.2)

    def test_seed_becomes_first_operand(self):
        nodes = self.build("*2", seed=NumberValue(21.0))
        self.assertEqual([v.value for v in nodes[0].prior], [21.0])
        self.assertEqual(nodes[0].operator.name, "mul")

    def test_unclosed_group_warns(self):
        nodes = self.build("(1+2")
        self.assertIsNotNone(nodes)
        self.assertFalse(self.messages.has_errors())
        self.assertTrue(self.messages.has_kind(ErrorKind.UNBALANCED_GROUP))
        self.assertEqual(nodes[0].children[-1].state, NodeState.ERRORED)

    def test_unknown_text_fails(self):
        self.assertIsNone(self.build("2 $"))
        self.assertTrue(self.messages.has_kind(ErrorKind.UNKNOWN_FUNCTION))

    def test_bad_unit_fails(self):
        self.assertIsNone(self.build("5:xyz"))
        self.assertTrue(self.messages.has_kind(ErrorKind.UNKNOWN_UNIT))

    def test_describe(self):
        nodes = self.build("sin(30)")
        text = nodes[0].describe()
        self.assertIn("op=sin", text)
        self.assertIn("  ", text.splitlines()[1])


class TestEvaluator(TreeTestCase):
    def test_nested_groups(self):
        ok, stack = self.run_nodes(self.build("4-(.5/(3+4))"))
        self.assertTrue(ok)
        self.assertAlmostEqual(stack[-1].value, 3.928571429, places=9)

    def test_greedy_order(self):
        ok, stack = self.run_nodes(self.build("2*(3+4)*5"))
        self.assertEqual(stack[-1].value, 70)

    def test_function_of_group(self):
        ok, stack = self.run_nodes(self.build("6.*(9-1)/inv(10.0+2)-4.2"))
        self.assertTrue(ok)
        self.assertAlmostEqual(stack[-1].value, 571.8)

    def test_number_before_call_stays_on_stack(self):
        ok, stack = self.run_nodes(self.build("2sin(30)"))
        self.assertTrue(ok)
        self.assertEqual(len(stack), 2)
        self.assertAlmostEqual(stack[-1].value, 0.5)

    def test_missing_operand(self):
        ok, stack = self.run_nodes(self.build("+3"))
        self.assertFalse(ok)
        self.assertTrue(self.messages.has_kind(ErrorKind.MISSING_OPERAND))

    def test_reserved_token_fails_at_run(self):
        nodes = self.build("<[1]")
        self.assertIsNotNone(nodes)
        ok, _ = self.run_nodes(nodes)
        self.assertFalse(ok)
        self.assertTrue(self.messages.has_kind(ErrorKind.UNKNOWN_FUNCTION))

    def test_failure_stops_remaining_nodes(self):
        ok, stack = self.run_nodes(self.build("1/0+5"))
        self.assertFalse(ok)
        self.assertEqual([v.value for v in stack], [1, 0])

    def test_unresolved_variable(self):
        ok, _ = self.run_nodes(self.build("x+1"))
        self.assertFalse(ok)
        self.assertTrue(self.messages.has_kind(ErrorKind.UNRESOLVED_VARIABLE))


if __name__ == "__main__":
    unittest.main()
