#!/usr/bin/env python
"""
Numcy Demo: Shared Ownership and Broadcasting
=============================================

Walks through the runtime: shapes, aliasing versus copying, the three
broadcasting rules and a few ops, with allocator bookkeeping printed along
the way.
"""

import sys
import os
import logging

# Add parent directory to path so we can import numcy
parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, parent_dir)

import numcy as nc
from numcy import Axis


def demo_shapes():
    """Demo: the two shape encodings."""
    print("\n" + "=" * 60)
    print("SHAPES")
    print("=" * 60)

    shape = nc.ShapeList.of(2, 3, 4)
    print(f"\nShapeList links: {shape.links}")
    print(f"n = {shape.n}, rows = {shape.rows}, columns = {shape.columns}")
    print(f"As a flat vector: {shape.to_vector()}")


def demo_ownership():
    """Demo: alias shares, copy duplicates."""
    print("\n" + "=" * 60)
    print("OWNERSHIP")
    print("=" * 60)

    allocator = nc.get_allocator()
    a = nc.arange(6, like=[2, 3])
    b = a.alias()
    c = a.copy()
    print(f"\nrefs after alias: a={a.reference_count}, b={b.reference_count}")
    b[0] = 100
    print(f"write through alias -> a[0] = {a[0]}, copy c[0] = {c[0]}")
    b.release()
    print(f"refs after release: a={a.reference_count}")
    print(f"live buffers: {allocator.live_buffers}")


def demo_broadcasting():
    """Demo: scalar, row and column broadcasting."""
    print("\n" + "=" * 60)
    print("BROADCASTING")
    print("=" * 60)

    m = nc.arange(12.0, like=[3, 4])
    print(f"\nm =\n{m.numpy()}")
    print(f"\nm + 10 =\n{(m + 10).numpy()}")
    print(f"\nm + row =\n{(m + nc.Tensor([[1.0, 2.0, 3.0, 4.0]])).numpy()}")
    print(f"\nm - column =\n{(m - nc.Tensor([[1.0], [2.0], [3.0]])).numpy()}")

    try:
        m / nc.Tensor([[0.0]])
    except nc.DivideByZeroError as e:
        print(f"\nDivision by a zero scalar: {e}")


def demo_ops():
    """Demo: linear algebra and reductions."""
    print("\n" + "=" * 60)
    print("OPS")
    print("=" * 60)

    m = nc.randn([3, 3], seed=42)
    print(f"\ntriu(m) =\n{nc.triu(m).numpy()}")
    print(f"\nmean over rows = {nc.mean(m).numpy()}")
    print(f"column norms = {nc.norm(m, Axis.COLUMN).numpy()}")
    print(f"outer([1,2],[3,4]) =\n{nc.outer(nc.Tensor([1, 2]), nc.Tensor([3, 4])).numpy()}")

    u = nc.Tensor([[1.0, 2.0, 3.0]])
    v = nc.Tensor([[3.0, 2.0, 1.0]])
    print(f"\ncosine(u, v) = {nc.cosine(u, v):.4f}")

    try:
        nc.cosine(nc.ones([2, 3]), nc.ones([2, 3]))
    except nc.IncompatibleShapesError as e:
        print(f"Shape mismatch: {e}")


if __name__ == '__main__':
    nc.config.setup_logging(logging.INFO)
    demo_shapes()
    demo_ownership()
    demo_broadcasting()
    demo_ops()
