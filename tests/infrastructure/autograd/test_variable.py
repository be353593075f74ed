import unittest
from unittest import TestCase

import numpy as np

from keygrad.domain._errors import InvalidArgumentError, InvariantViolationError
from keygrad.domain._function import Function
from keygrad.domain._variable import IVariable
from keygrad.domain.device._device import Device
from keygrad.infrastructure.autograd._variable import Variable
from keygrad.infrastructure.autograd._version_counter import VersionCounter
from keygrad.infrastructure.tensor._tensor import Tensor


def tensor_from_np(arr) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=np.float32), dtype=np.float32)


class _StubFn(Function):
    def apply(self, grad_outputs):
        return [None for _ in self.previous_functions]


class TestLeafConstruction(TestCase):

    def test_leaf_defaults(self):
        """A leaf should start with no creator, no grad, no hook and version 0."""
        data = tensor_from_np([1.0, 2.0])
        v = Variable(data)

        self.assertIs(v.data, data)
        self.assertFalse(v.requires_grad)
        self.assertFalse(v.is_volatile)
        self.assertIsNone(v.creator)
        self.assertTrue(v.is_leaf)
        self.assertEqual(v.output_nr, 0)
        self.assertEqual(v.previous_functions, [])
        self.assertIsNone(v.grad)
        self.assertIsNone(v.backward_hook)
        self.assertIsNone(v.pyobj)
        self.assertIsInstance(v.version_counter, VersionCounter)
        self.assertEqual(v.version, 0)

    def test_leaf_flags(self):
        """Constructor flags should be stored on a leaf."""
        v = Variable(tensor_from_np([0.0]), requires_grad=True, is_volatile=True)
        self.assertTrue(v.requires_grad)
        self.assertTrue(v.is_volatile)

    def test_leaf_flags_can_be_toggled(self):
        """Flags of a leaf should stay writable."""
        v = Variable(tensor_from_np([0.0]))
        v.requires_grad = True
        v.is_volatile = True
        self.assertTrue(v.requires_grad)
        self.assertTrue(v.is_volatile)

    def test_leaf_is_a_zero_output_node(self):
        """A leaf should be a Function with no outputs."""
        v = Variable(tensor_from_np([0.0]))
        self.assertIsInstance(v, Function)
        self.assertEqual(v.num_outputs, 0)

    def test_leaf_satisfies_variable_protocol(self):
        """Variable should satisfy IVariable."""
        self.assertIsInstance(Variable(tensor_from_np([0.0])), IVariable)

    def test_leaf_with_none_data_raises(self):
        """Wrapping None should raise InvalidArgumentError."""
        with self.assertRaises(InvalidArgumentError):
            Variable(None)

    def test_each_variable_gets_its_own_counter(self):
        """Variables should not share version counters."""
        a = Variable(tensor_from_np([0.0]))
        b = Variable(tensor_from_np([0.0]))
        a.mark_dirty()
        self.assertEqual(a.version, 1)
        self.assertEqual(b.version, 0)


class TestInternalConstruction(TestCase):

    def test_output_indices_follow_construction_order(self):
        """Outputs of one node should be numbered in construction order."""
        fn = _StubFn(requires_grad=True)
        out0 = Variable.from_creator(tensor_from_np([1.0]), fn)
        out1 = Variable.from_creator(tensor_from_np([2.0]), fn)

        self.assertEqual(out0.output_nr, 0)
        self.assertEqual(out1.output_nr, 1)
        self.assertEqual(fn.num_outputs, 2)

    def test_internal_value_records_creator_edge(self):
        """An internal value should point back at (creator, output_nr)."""
        fn = _StubFn()
        out = Variable.from_creator(tensor_from_np([1.0]), fn)

        self.assertIs(out.creator, fn)
        self.assertFalse(out.is_leaf)
        self.assertEqual(len(out.previous_functions), 1)
        creator, index = out.previous_functions[0]
        self.assertIs(creator, fn)
        self.assertEqual(index, 0)

    def test_flags_are_inherited_from_creator(self):
        """An internal value should copy both flags from its creator."""
        fn = _StubFn(is_volatile=True, requires_grad=True)
        out = Variable.from_creator(tensor_from_np([1.0]), fn)
        self.assertTrue(out.is_volatile)
        self.assertTrue(out.requires_grad)

        fn2 = _StubFn()
        out2 = Variable.from_creator(tensor_from_np([1.0]), fn2)
        self.assertFalse(out2.is_volatile)
        self.assertFalse(out2.requires_grad)

    def test_flags_fixed_after_construction(self):
        """Later changes to the creator's flags should not propagate."""
        fn = _StubFn(requires_grad=True)
        out = Variable.from_creator(tensor_from_np([1.0]), fn)
        fn.requires_grad = False
        self.assertTrue(out.requires_grad)

    def test_internal_flags_cannot_be_reassigned(self):
        """Assigning either flag on an internal value should raise."""
        fn = _StubFn(requires_grad=True)
        out = Variable.from_creator(tensor_from_np([1.0]), fn)

        with self.assertRaises(InvariantViolationError):
            out.requires_grad = False
        with self.assertRaises(InvariantViolationError):
            out.is_volatile = True
        self.assertTrue(out.requires_grad)
        self.assertFalse(out.is_volatile)

    def test_internal_value_gets_fresh_counter(self):
        """An internal value should start at version 0."""
        fn = _StubFn()
        out = Variable.from_creator(tensor_from_np([1.0]), fn)
        self.assertEqual(out.version, 0)

    def test_none_data_raises_and_leaves_creator_untouched(self):
        """A failed construction should not consume an output index."""
        fn = _StubFn()
        Variable.from_creator(tensor_from_np([1.0]), fn)

        with self.assertRaises(InvalidArgumentError):
            Variable.from_creator(None, fn)
        self.assertEqual(fn.num_outputs, 1)

        nxt = Variable.from_creator(tensor_from_np([2.0]), fn)
        self.assertEqual(nxt.output_nr, 1)

    def test_variable_can_be_a_creator(self):
        """A Variable should be usable as the creator of another."""
        # A Variable exposes the node contract, so it can stand in as creator.
        src = Variable(tensor_from_np([1.0]), requires_grad=True)
        out = Variable.from_creator(tensor_from_np([1.0]), src)
        self.assertEqual(out.output_nr, 0)
        self.assertEqual(src.num_outputs, 1)
        self.assertTrue(out.requires_grad)


class TestVariableMetadata(TestCase):

    def test_is_cuda_delegates_to_tensor(self):
        """is_cuda() should report the wrapped tensor's device."""
        cpu = Variable(tensor_from_np([1.0]))
        cuda = Variable(Tensor((1,), Device("cuda:0")))
        self.assertFalse(cpu.is_cuda())
        self.assertTrue(cuda.is_cuda())

    def test_data_can_be_reassigned(self):
        """data should accept a new tensor."""
        v = Variable(tensor_from_np([1.0]))
        new = tensor_from_np([2.0])
        v.data = new
        self.assertIs(v.data, new)

    def test_data_cannot_be_set_to_none(self):
        """Setting data to None should raise and keep the old tensor."""
        v = Variable(tensor_from_np([1.0]))
        with self.assertRaises(InvalidArgumentError):
            v.data = None
        self.assertIsNotNone(v.data)

    def test_mark_dirty_increments_version(self):
        """mark_dirty() should bump the version counter."""
        v = Variable(tensor_from_np([1.0]))
        v.mark_dirty()
        v.mark_dirty()
        self.assertEqual(v.version, 2)
        self.assertEqual(v.version_counter.read(), 2)

    def test_register_and_remove_hook(self):
        """register_hook() and remove_hook() should set and clear the hook."""
        v = Variable(tensor_from_np([1.0]))

        def hook(g):
            return g

        v.register_hook(hook)
        self.assertIs(v.backward_hook, hook)
        v.remove_hook()
        self.assertIsNone(v.backward_hook)

    def test_register_hook_rejects_non_callable(self):
        """register_hook() should reject non-callables."""
        v = Variable(tensor_from_np([1.0]))
        with self.assertRaises(TypeError):
            v.register_hook(42)

    def test_repr_mentions_kind_and_version(self):
        """repr() should say leaf or output index, and the version."""
        leaf = Variable(tensor_from_np([1.0]))
        self.assertIn("leaf", repr(leaf))
        out = Variable.from_creator(tensor_from_np([1.0]), _StubFn())
        self.assertIn("output 0", repr(out))
        self.assertIn("version=0", repr(out))


if __name__ == "__main__":
    unittest.main()
