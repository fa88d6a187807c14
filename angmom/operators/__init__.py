from angmom.operators.matrix import MatrixOperator

__all__ = ["MatrixOperator"]
