"""
Basic test to verify package setup is correct.
"""

def test_package_imports():
    """Test that the package can be imported."""
    import satisfiability
    assert satisfiability.__version__ == "0.1.0"
    assert hasattr(satisfiability, '__version__')


def test_package_structure():
    """Test that subpackages are accessible."""
    from satisfiability import expr, smt, solver
    assert expr.Expr is not None
    assert smt.SMTSerializer is not None
    assert solver.open_session is not None
