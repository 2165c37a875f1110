# Copyright (C) 2006-2011, Timothy A. Davis.
# Copyright (C) 2012, Richard Lincoln.
# http://www.cise.ufl.edu/research/sparse/CSparse
#
# CSparse.py is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 2.1 of the License, or (at your option) any later version.
#
# CSparse.py is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this Module; if not, write to the Free Software
# Foundation, Inc, 51 Franklin St, Fifth Floor, Boston, MA 02110-1301

"""SparseCSC.py: compressed-sparse-column matrix operations and the
symbolic/numeric triangular solvers used inside sparse factorizations.

All routines work on L{cs} matrices. Scratch arrays may be passed in to
avoid reallocation in repeated calls; passing C{None} allocates them.
"""

import logging

from sys import stdout

import numpy as np


CS_VER = 1 # SparseCSC.py Version 1.0.0
CS_SUBVER = 0
CS_SUBSUB = 0
CS_DATE = "October 16, 2026" # SparseCSC.py release date
CS_COPYRIGHT = "Copyright (C) Timothy A. Davis, 2006-2011"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class CSError(Exception):
    """Base class for errors raised by SparseCSC.py.
    """


class CSShapeError(CSError, ValueError):
    """Operand dimensions are incompatible.
    """


class CSWorkspaceError(CSError, ValueError):
    """A supplied workspace or output array is shorter than required.
    """


class CSStructureError(CSError, ValueError):
    """The sparsity structure breaks the contract of an operation.
    """


class cs(object):
    """Matrix in compressed-column form.
    """
    def __init__(self):
        #: maximum number of entries
        self.nzmax = 0
        #: number of rows
        self.m = 0
        #: number of columns
        self.n = 0
        #: column pointers (size n+1)
        self.p = []
        #: row indices, size nzmax
        self.i = []
        #: numerical values, size nzmax
        self.x = []
        #: number of entries in use, p[n] when consistent
        self.nz = 0
        #: true if row indices are strictly ascending in every column
        self.sorted = True


def CS_FLIP(i):
    return -(i) - 2


def CS_UNFLIP(i):
    return CS_FLIP(i) if i < 0 else i


def CS_MARKED(w, j):
    return w[j] < 0


def CS_MARK(w, j):
    w[j] = CS_FLIP(w[j])


# Workspace and storage.

def ialloc(n, w=None, clear=0):
    """Provides an integer workspace of at least n entries.

    @param n: minimum length
    @param w: workspace to reuse, a new zeroed one is allocated if None
    @param clear: number of leading entries of w set to zero
    @return: the workspace
    """
    if w is None:
        return [0]*n
    if len(w) < n:
        raise CSWorkspaceError("integer workspace has %d entries, %d needed"
                % (len(w), n))
    for k in range(clear):
        w[k] = 0
    return w


def xalloc(n, x=None, clear=0):
    """Provides a floating point workspace of at least n entries.

    @param n: minimum length
    @param x: workspace to reuse, a new zeroed one is allocated if None
    @param clear: number of leading entries of x set to zero
    @return: the workspace
    """
    if x is None:
        return [0.0]*n
    if len(x) < n:
        raise CSWorkspaceError("double workspace has %d entries, %d needed"
                % (len(x), n))
    for k in range(clear):
        x[k] = 0.0
    return x


def cs_spalloc(m, n, nzmax):
    """Allocate an all-zero sparse matrix in compressed-column form.

    @param m: number of rows
    @param n: number of columns
    @param nzmax: maximum number of entries
    @return: sparse matrix
    """
    A = cs() # allocate the cs object
    A.m = m # define dimensions and nzmax
    A.n = n
    A.nzmax = nzmax = max(nzmax, 1)
    A.p = ialloc(n + 1)
    A.i = ialloc(nzmax)
    A.x = xalloc(nzmax)
    return A


def cs_sprealloc(A, nzmax, preserve=True):
    """Change the max # of entries a sparse matrix can hold.

    @param A: column-compressed matrix
    @param nzmax: new maximum number of entries, A.nz if <= 0
    @param preserve: copy the old entries into the new storage
    """
    if nzmax <= 0:
        nzmax = A.nz
    logger.debug("%d-by-%d matrix storage resized from %d to %d entries",
            A.m, A.n, A.nzmax, nzmax)
    Ainew = ialloc(nzmax)
    Axnew = xalloc(nzmax)
    if preserve:
        length = min(nzmax, len(A.i))
        Ainew[:length] = A.i[:length]
        Axnew[:length] = A.x[:length]
    A.i = Ainew
    A.x = Axnew
    A.nzmax = nzmax


def cs_reshape(A, m, n, nzmax=0):
    """Changes the shape of A and removes all of its entries. Storage is
    grown, never shrunk, so that it can hold at least nzmax entries.
    """
    if nzmax > A.nzmax:
        cs_sprealloc(A, nzmax, False)
    A.m = m
    A.n = n
    A.p = ialloc(n + 1)
    A.nz = 0
    A.sorted = True


def cs_copy_structure(A, B):
    """Copies the shape and nonzero pattern of A into B. The values of B are
    left as they are.
    """
    if B.nzmax < A.nz:
        cs_sprealloc(B, A.nz, False)
    B.m = A.m
    B.n = A.n
    B.p = A.p[:A.n + 1]
    B.i[:A.nz] = A.i[:A.nz]
    B.nz = A.nz
    B.sorted = A.sorted


def cs_cumsum(p, c, n):
    """p [0..n] = cumulative sum of c [0..n-1], and then copy p [0..n-1] into c

    @param p: size n+1, cumulative sum of c
    @param c: size n, overwritten with p [0..n-1] on output
    @param n: length of c
    @return: sum (c)
    """
    nz = 0
    for i in range(n):
        p[i] = nz
        nz += c[i]
        c[i] = p[i] # also copy p[0..n-1] back into c[0..n-1]
    p[n] = nz
    return nz


# Structure checks.

def cs_check_sorted(A):
    """Returns true if the row indices in every column of A are in range and
    strictly ascending. O(nnz)
    """
    m, n, Ap, Ai = A.m, A.n, A.p, A.i
    for j in range(n):
        p0 = Ap[j]
        if p0 != Ap[j + 1] and Ai[p0] >= m:
            return False
        for p in range(p0 + 1, Ap[j + 1]):
            if Ai[p - 1] >= Ai[p] or Ai[p] >= m:
                return False
    return True


def cs_check_sorted_flag(A):
    """Returns false only if A claims to be sorted and is not.
    """
    return cs_check_sorted(A) if A.sorted else True


def cs_check_triangular(G, lo=True):
    """Verifies that G is a square triangular matrix whose non-zero diagonal
    entry is the first (lower) or last (upper) entry of each column.

    @param G: column-compressed matrix
    @param lo: true if lower triangular, false if upper
    @raise CSShapeError: G is not square
    @raise CSStructureError: G breaks the triangular storage contract
    """
    n, Gp, Gi, Gx = G.n, G.p, G.i, G.x
    if G.m != n:
        raise CSShapeError("triangular matrix must be square, got %d-by-%d"
                % (G.m, n))
    for j in range(n):
        p0, p1 = Gp[j], Gp[j + 1]
        if p0 == p1:
            raise CSStructureError("column %d is empty" % j)
        d = p0 if lo else p1 - 1
        if Gi[d] != j or Gx[d] == 0:
            raise CSStructureError("diagonal entry (%d,%d) missing or zero"
                    % (j, j))
        for p in range(p0, p1):
            if (Gi[p] < j) if lo else (Gi[p] > j):
                raise CSStructureError("entry (%d,%d) outside the triangle"
                        % (Gi[p], j))


def _cs_perm_check(p, n):
    if len(p) < n:
        raise CSShapeError("permutation has %d entries, %d expected"
                % (len(p), n))
    seen = [False]*n
    for k in range(n):
        i = p[k]
        if i < 0 or i >= n or seen[i]:
            raise CSStructureError("not a permutation of 0..%d: p[%d] = %d"
                    % (n - 1, k, i))
        seen[i] = True


# Element-wise queries.

def cs_norm(A):
    """Computes the 1-norm of a sparse matrix = max (sum (abs (A))), largest
    column sum.

    @param A: column-compressed matrix
    @return: the 1-norm
    """
    norm = 0
    n, Ap, Ax = A.n, A.p, A.x
    for j in range(n):
        s = 0
        for p in range(Ap[j], Ap[j + 1]):
            s += abs(Ax[p])
        norm = max(norm, s)
    return norm


def _cs_extreme(A, select, key):
    if A.nz == 0:
        return 0.0
    # unstored entries are zeros unless every entry is stored
    best = key(A.x[0]) if A.nz == A.m * A.n else 0.0
    for p in range(A.nz):
        best = select(best, key(A.x[p]))
    return best


def cs_element_min(A):
    return _cs_extreme(A, min, float)


def cs_element_max(A):
    return _cs_extreme(A, max, float)


def cs_element_min_abs(A):
    return _cs_extreme(A, min, abs)


def cs_element_max_abs(A):
    return _cs_extreme(A, max, abs)


def cs_print(A, brief=False):
    """Prints a sparse matrix.

    @param A: column-compressed matrix
    @param brief: print all of A if false, a few entries otherwise
    """
    if A is None:
        stdout.write("(null)\n")
        return
    m, n, Ap, Ai, Ax = A.m, A.n, A.p, A.i, A.x
    stdout.write("SparseCSC.py Version %d.%d.%d, %s.  %s\n" % (CS_VER,
            CS_SUBVER, CS_SUBSUB, CS_DATE, CS_COPYRIGHT))
    stdout.write("%d-by-%d, nzmax: %d nnz: %d, 1-norm: %g\n" % (m, n,
            A.nzmax, Ap[n], cs_norm(A)))
    for j in range(n):
        stdout.write("    col %d : locations %d to %d\n" % (j, Ap[j], Ap[j + 1] - 1))
        for p in range(Ap[j], Ap[j + 1]):
            stdout.write("      %d : %g\n" % (Ai[p], Ax[p]))
            if brief and p > 20:
                stdout.write("  ...\n")
                return


def cs_todense(A):
    """Returns A as a dense 2-D array. Duplicate entries are summed.
    """
    D = np.zeros((A.m, A.n))
    Ap, Ai, Ax = A.p, A.i, A.x
    for j in range(A.n):
        for p in range(Ap[j], Ap[j + 1]):
            D[Ai[p], j] += Ax[p]
    return D


def cs_fromdense(D, tol=0.0):
    """Compressed-column form of a dense matrix.

    @param D: 2-D array-like
    @param tol: entries with abs(D[i,j]) <= tol are not stored
    @return: sorted column-compressed matrix
    """
    D = np.asarray(D, dtype=float)
    if D.ndim != 2:
        raise CSShapeError("expected a 2-D array, got %d dimensions" % D.ndim)
    m, n = D.shape
    keep = np.abs(D) > tol
    A = cs_spalloc(m, n, int(keep.sum()))
    Ap, Ai, Ax = A.p, A.i, A.x
    nz = 0
    for j in range(n):
        Ap[j] = nz
        for i in np.flatnonzero(keep[:, j]):
            Ai[nz] = int(i)
            Ax[nz] = float(D[i, j])
            nz += 1
    Ap[n] = nz
    A.nz = nz
    return A


# Constructors.

def cs_identity(m, n=None):
    """Sparse identity matrix. A rectangular matrix has ones on its main
    diagonal only.

    @param m: number of rows
    @param n: number of columns, m if None
    """
    n = m if n is None else n
    mn = min(m, n)
    A = cs_spalloc(m, n, mn)
    Ap, Ai, Ax = A.p, A.i, A.x
    for k in range(mn):
        Ai[k] = k
        Ax[k] = 1.0
        Ap[k + 1] = k + 1
    for k in range(mn + 1, n + 1):
        Ap[k] = mn
    A.nz = mn
    return A


def cs_diag(values):
    """Square diagonal matrix with the given diagonal values.
    """
    values = list(values)
    n = len(values)
    A = cs_spalloc(n, n, n)
    Ap, Ai, Ax = A.p, A.i, A.x
    for k in range(n):
        Ai[k] = k
        Ax[k] = values[k]
        Ap[k + 1] = k + 1
    A.nz = n
    return A


# Permutations.

def cs_permutation_matrix(p, P=None):
    """Converts a permutation vector into a matrix such that B = P*A has
    B[p[k],:] = A[k,:], i.e. P(p[k],k) = 1.

    @param p: permutation vector
    @param P: output matrix, reshaped; allocated if None
    @return: P
    """
    n = len(p)
    _cs_perm_check(p, n)
    if P is None:
        P = cs_spalloc(n, n, n)
    else:
        cs_reshape(P, n, n, n)
    Pp, Pi, Px = P.p, P.i, P.x
    for k in range(n):
        Pp[k + 1] = k + 1 # one entry per column
        Pi[k] = p[k]
        Px[k] = 1.0
    P.nz = n
    P.sorted = True
    return P


def cs_permutation_vector(P, v=None):
    """Converts a permutation matrix into a vector, the inverse of
    L{cs_permutation_matrix}.

    @param P: permutation matrix
    @param v: output vector of length >= P.n, allocated if None
    @return: v
    """
    n = P.n
    if P.m != n:
        raise CSShapeError("expected a square matrix, got %d-by-%d" % (P.m, n))
    if P.nz != n:
        raise CSShapeError("expected %d entries in permutation matrix, got %d"
                % (n, P.nz))
    for k in range(n):
        if P.p[k + 1] != k + 1:
            raise CSShapeError("column %d does not hold exactly one entry" % k)
    _cs_perm_check(P.i, n)
    v = ialloc(n, v)
    for k in range(n):
        v[k] = P.i[k]
    return v


def cs_pinv(p, n=None, pinv=None):
    """Inverts a permutation vector. Returns pinv[i] = k if p[k] = i on input.

    @param p: a permutation vector, None denotes identity
    @param n: length of p, len(p) if None
    @param pinv: output vector, allocated if None
    @return: pinv, None if p is None
    """
    if p is None:
        return None # p = None denotes identity
    n = len(p) if n is None else n
    _cs_perm_check(p, n)
    pinv = ialloc(n, pinv)
    for k in range(n):
        pinv[p[k]] = k # invert the permutation
    return pinv


def cs_pvec(p, b, x=None):
    """Permutes a vector, x=P*b, for dense vectors x and b.

    @param p: permutation vector, None denotes identity
    @param b: input vector
    @param x: output vector, allocated if None
    @return: x
    """
    n = len(b)
    x = xalloc(n, x)
    for k in range(n):
        x[k] = b[p[k] if p is not None else k]
    return x


def cs_ipvec(p, b, x=None):
    """Permutes a vector, x = P'b.

    @param p: permutation vector, None denotes identity
    @param b: input vector
    @param x: output vector, allocated if None
    @return: x
    """
    n = len(b)
    x = xalloc(n, x)
    for k in range(n):
        x[p[k] if p is not None else k] = b[k]
    return x


def cs_permute_row_inv(pinv, A, C=None):
    """Permutes the rows of a sparse matrix, C[pinv[i],:] = A[i,:].

    @param pinv: inverse row permutation, length A.m
    @param A: column-compressed matrix
    @param C: output matrix, may be A; allocated if None
    @return: C
    """
    m, n, nz = A.m, A.n, A.nz
    if len(pinv) != m:
        raise CSShapeError("row permutation has %d entries, A has %d rows"
                % (len(pinv), m))
    Ap, Ai, Ax = A.p, A.i, A.x
    if C is None:
        C = cs_spalloc(m, n, nz)
    elif C is not A:
        cs_reshape(C, m, n, nz)
    Cp, Ci, Cx = C.p, C.i, C.x
    for k in range(n + 1):
        Cp[k] = Ap[k]
    for k in range(nz):
        Ci[k] = pinv[Ai[k]]
        Cx[k] = Ax[k]
    C.nz = nz
    C.sorted = False
    return C


def cs_permute(pinv, A, q, C=None):
    """Permutes a sparse matrix, C = PAQ, so that C[pinv[i],k] = A[i,q[k]].

    @param pinv: inverse row permutation of length m, None denotes identity
    @param A: m-by-n, column-compressed matrix
    @param q: column permutation of length n, None denotes identity
    @param C: output matrix, reshaped; allocated if None. Must not be A
    @return: C = PAQ
    """
    m, n, Ap, Ai, Ax = A.m, A.n, A.p, A.i, A.x
    if pinv is not None and len(pinv) != m:
        raise CSShapeError("row permutation has %d entries, A has %d rows"
                % (len(pinv), m))
    if q is not None and len(q) != n:
        raise CSShapeError("column permutation has %d entries, A has %d columns"
                % (len(q), n))
    if C is A:
        raise CSError("output of cs_permute must not be its input")
    if C is None:
        C = cs_spalloc(m, n, A.nz)
    else:
        cs_reshape(C, m, n, A.nz)
    Cp, Ci, Cx = C.p, C.i, C.x
    nz = 0
    for k in range(n):
        Cp[k] = nz # column k of C is column q[k] of A
        j = q[k] if q is not None else k
        for t in range(Ap[j], Ap[j + 1]):
            Cx[nz] = Ax[t] # row i of A is row pinv[i] of C
            Ci[nz] = pinv[Ai[t]] if pinv is not None else Ai[t]
            nz += 1
    Cp[n] = nz # finalize the last column of C
    C.nz = nz
    C.sorted = False
    return C


# Transpose, addition, multiplication.

def cs_transpose(A, C=None, w=None):
    """Computes the transpose of a sparse matrix, C = A'. Rows of C are
    always sorted.

    @param A: column-compressed matrix
    @param C: n-by-m output matrix, allocated if None. Must not be A
    @param w: workspace of length A.m, allocated if None
    @return: C = A'
    """
    m, n, Ap, Ai, Ax = A.m, A.n, A.p, A.i, A.x
    if C is None:
        C = cs_spalloc(n, m, Ap[n]) # allocate result
    elif C.m != n or C.n != m:
        raise CSShapeError("transpose of a %d-by-%d matrix cannot be stored "
                "in a %d-by-%d matrix" % (m, n, C.m, C.n))
    w = ialloc(m, w, m) # get workspace
    if C.nzmax < Ap[n]:
        cs_sprealloc(C, Ap[n], False)
    Cp, Ci, Cx = C.p, C.i, C.x
    for p in range(Ap[n]):
        w[Ai[p]] += 1 # row counts
    cs_cumsum(Cp, w, m) # row pointers
    for j in range(n):
        for p in range(Ap[j], Ap[j + 1]):
            q = w[Ai[p]]
            w[Ai[p]] += 1
            Ci[q] = j # place A(i,j) as entry C(j,i)
            Cx[q] = Ax[p]
    C.nz = Ap[n]
    C.sorted = True
    return C


def cs_scatter(A, j, beta, w, x, mark, C, nz):
    """Scatters and sums a sparse vector A(:,j) into a dense vector, x = x +
    beta * A(:,j). The storage of C is grown if it is too small.

    @param A: the sparse vector is A(:,j)
    @param j: the column of A to use
    @param beta: scalar multiplied by A(:,j)
    @param w: size m, node i is marked if w[i] = mark
    @param x: size m, dense accumulator
    @param mark: mark value of w
    @param C: pattern of x accumulated in C.i
    @param nz: pattern of x placed in C starting at C.i[nz]
    @return: new value of nz
    """
    Ap, Ai, Ax = A.p, A.i, A.x
    count = Ap[j + 1] - Ap[j]
    if nz + count > C.nzmax:
        cs_sprealloc(C, 2 * C.nzmax + count)
    Ci = C.i
    for p in range(Ap[j], Ap[j + 1]):
        i = Ai[p] # A(i,j) is nonzero
        if w[i] < mark:
            w[i] = mark # i is new entry in column j
            Ci[nz] = i # add i to pattern of C(:,j)
            nz += 1
            x[i] = beta * Ax[p] # x(i) = beta*A(i,j)
        else:
            x[i] += beta * Ax[p] # i exists in C(:,j) already
    return nz


def cs_add(A, B, alpha=1.0, beta=1.0, C=None, w=None, x=None):
    """C = alpha*A + beta*B

    @param A: column-compressed matrix
    @param B: column-compressed matrix
    @param alpha: scalar alpha
    @param beta: scalar beta
    @param C: output matrix of the same shape, allocated if None. Must not
    be A or B
    @param w: integer workspace of length A.m, allocated if None
    @param x: double workspace of length A.m, allocated if None
    @return: C = alpha*A + beta*B
    """
    if A.m != B.m or A.n != B.n:
        raise CSShapeError("cannot add a %d-by-%d and a %d-by-%d matrix"
                % (A.m, A.n, B.m, B.n))
    m, n = A.m, A.n
    if C is not None and (C.m != m or C.n != n):
        raise CSShapeError("sum is %d-by-%d, output is %d-by-%d"
                % (m, n, C.m, C.n))
    w = ialloc(m, w, m) # get workspace
    x = xalloc(m, x)
    if C is None:
        C = cs_spalloc(m, n, A.p[n] + B.p[n]) # allocate result
    nz = 0
    Cp = C.p
    for j in range(n):
        Cp[j] = nz # column j of C starts here
        nz = cs_scatter(A, j, alpha, w, x, j + 1, C, nz) # alpha*A(:,j)
        nz = cs_scatter(B, j, beta, w, x, j + 1, C, nz) # beta*B(:,j)
        Ci, Cx = C.i, C.x # C.i and C.x may be reallocated
        for p in range(Cp[j], nz):
            Cx[p] = x[Ci[p]]
    Cp[n] = nz # finalize the last column of C
    C.nz = nz
    C.sorted = False
    return C


def cs_multiply(A, B, C=None, w=None, x=None):
    """Sparse matrix multiplication, C = A*B

    @param A: column-compressed matrix
    @param B: column-compressed matrix
    @param C: A.m-by-B.n output matrix, allocated if None. Must not be A or B
    @param w: integer workspace of length A.m, allocated if None
    @param x: double workspace of length A.m, allocated if None
    @return: C = A*B
    """
    if A.n != B.m:
        raise CSShapeError("cannot multiply a %d-by-%d and a %d-by-%d matrix"
                % (A.m, A.n, B.m, B.n))
    m, n, Bp, Bi, Bx = A.m, B.n, B.p, B.i, B.x
    if C is not None and (C.m != m or C.n != n):
        raise CSShapeError("product is %d-by-%d, output is %d-by-%d"
                % (m, n, C.m, C.n))
    w = ialloc(m, w, m) # get workspace
    x = xalloc(m, x)
    if C is None:
        C = cs_spalloc(m, n, A.p[A.n] + Bp[n]) # allocate result
    nz = 0
    Cp = C.p
    for j in range(n):
        Cp[j] = nz # column j of C starts here
        for p in range(Bp[j], Bp[j + 1]):
            nz = cs_scatter(A, Bi[p], Bx[p], w, x, j + 1, C, nz)
        Ci, Cx = C.i, C.x # C.i and C.x may be reallocated
        for p in range(Cp[j], nz):
            Cx[p] = x[Ci[p]]
    Cp[n] = nz # finalize the last column of C
    C.nz = nz
    C.sorted = False
    return C


def cs_mult_dense(A, B, C=None):
    """Sparse times dense matrix multiplication, C = A*B.

    @param A: column-compressed matrix
    @param B: dense 2-D array with A.n rows
    @param C: dense A.m-by-B.shape[1] output array, allocated if None
    @return: C = A*B
    """
    B = np.asarray(B, dtype=float)
    if B.ndim != 2 or B.shape[0] != A.n:
        raise CSShapeError("cannot multiply a %d-by-%d matrix and an array "
                "of shape %s" % (A.m, A.n, B.shape))
    shape = (A.m, B.shape[1])
    if C is None:
        C = np.zeros(shape)
    elif C.shape != shape:
        raise CSShapeError("product has shape %s, output has shape %s"
                % (shape, C.shape))
    else:
        C[:] = 0.0
    Ap, Ai, Ax = A.p, A.i, A.x
    for k in range(A.n):
        for p in range(Ap[k], Ap[k + 1]):
            C[Ai[p], :] += Ax[p] * B[k, :] # C(i,:) += A(i,k)*B(k,:)
    return C


def cs_gaxpy(A, x, y):
    """Sparse matrix times dense column vector, y = A*x+y.

    @param A: column-compressed matrix
    @param x: size n, vector x
    @param y: size m, vector y, updated in place
    @return: y
    """
    if len(x) < A.n or len(y) < A.m:
        raise CSShapeError("vectors of length %d and %d do not fit a "
                "%d-by-%d matrix" % (len(x), len(y), A.m, A.n))
    n, Ap, Ai, Ax = A.n, A.p, A.i, A.x
    for j in range(n):
        for p in range(Ap[j], Ap[j + 1]):
            y[Ai[p]] += Ax[p] * x[j]
    return y


def cs_scale(alpha, A, B=None):
    """B = alpha*A, with the structure of A copied exactly.

    @param alpha: scalar
    @param A: column-compressed matrix
    @param B: output matrix of the same shape, may be A; allocated if None
    @return: B
    """
    B = _cs_like(A, B)
    Ax, Bx = A.x, B.x
    for p in range(A.nz):
        Bx[p] = Ax[p] * alpha
    return B


def cs_divide(A, alpha, B=None):
    """B = A/alpha, with the structure of A copied exactly.

    @param A: column-compressed matrix
    @param alpha: scalar
    @param B: output matrix of the same shape, may be A; allocated if None
    @return: B
    """
    B = _cs_like(A, B)
    Ax, Bx = A.x, B.x
    for p in range(A.nz):
        Bx[p] = Ax[p] / alpha
    return B


def _cs_like(A, B):
    if B is None:
        B = cs_spalloc(A.m, A.n, A.nz)
    elif B.m != A.m or B.n != A.n:
        raise CSShapeError("expected a %d-by-%d output, got %d-by-%d"
                % (A.m, A.n, B.m, B.n))
    cs_copy_structure(A, B)
    return B


# Dense triangular solves.

def cs_lsolve(L, x, check=False):
    """Solves a lower triangular system Lx=b where x and b are dense. x=b on
    input, solution on output. The diagonal of L must be the first entry of
    each column.

    @param L: column-compressed, lower triangular matrix
    @param x: size n, right hand side on input, solution on output
    @param check: verify the triangular structure of L first
    @return: x
    """
    if check:
        cs_check_triangular(L, True)
    n, Lp, Li, Lx = L.n, L.p, L.i, L.x
    for j in range(n):
        x[j] /= Lx[Lp[j]]
        for p in range(Lp[j] + 1, Lp[j + 1]):
            x[Li[p]] -= Lx[p] * x[j]
    return x


def cs_usolve(U, x, check=False):
    """Solves an upper triangular system Ux=b, where x and b are dense vectors.
    The diagonal of U must be the last entry of each column.

    @param U: upper triangular matrix in column-compressed form
    @param x: size n, right hand side on input, solution on output
    @param check: verify the triangular structure of U first
    @return: x
    """
    if check:
        cs_check_triangular(U, False)
    n, Up, Ui, Ux = U.n, U.p, U.i, U.x
    j = n - 1
    while j >= 0:
        x[j] /= Ux[Up[j + 1] - 1]
        for p in range(Up[j], Up[j + 1] - 1):
            x[Ui[p]] -= Ux[p] * x[j]
        j -= 1
    return x


# Depth-first-search.

def cs_dfs(j, G, top, xi, w, pinv=None):
    """Depth-first-search of the graph of a matrix, starting at node j. Nodes
    are placed in xi in reverse order of completion, so that xi[top..N-1] is
    a topological order of everything reached so far.

    The search is non-recursive: xi[0..head] is the recursion stack, w[0..N-1]
    flags visited nodes and w[N+head] is the position in the column of the
    node at stack level head where its search is paused.

    @param j: starting node, must not be visited
    @param G: graph to search
    @param top: xi[top..N-1] is used on input
    @param xi: size N = G.m, stack and output
    @param w: size 2*N, work array
    @param pinv: mapping of rows to columns of G, ignored if None
    @return: new value of top
    """
    N = G.m
    Gp, Gi = G.p, G.i
    head = 0
    xi[0] = j # initialize the recursion stack
    while head >= 0:
        j = xi[head] # get j from the top of the recursion stack
        jnew = pinv[j] if pinv is not None else j
        if w[j] == 0:
            w[j] = 1 # mark node j as visited
            w[N + head] = 0 if jnew < 0 else Gp[jnew]
        done = True # node j done if no unvisited neighbors
        p2 = 0 if jnew < 0 else Gp[jnew + 1]
        for p in range(w[N + head], p2): # examine all neighbors of j
            i = Gi[p] # consider neighbor node i
            if w[i]:
                continue # skip visited node i
            w[N + head] = p + 1 # pause depth-first search of node j
            head += 1
            xi[head] = i # start dfs at node i
            done = False # node j is not done
            break # break, to start dfs (i)
        if done: # depth-first search at node j is done
            head -= 1 # remove j from the recursion stack
            top -= 1
            xi[top] = j # and place in the output stack
    return top


def _cs_check_solve(G, B):
    if G.m != G.n:
        raise CSShapeError("triangular matrix must be square, got %d-by-%d"
                % (G.m, G.n))
    if B.m != G.m:
        raise CSShapeError("right hand side has %d rows, %d expected"
                % (B.m, G.m))


def cs_reach(G, B, k, xi, w=None, pinv=None):
    """Finds a nonzero pattern of x=G\\b for sparse triangular G and b.

    @param G: graph to search
    @param B: right hand side, b = B(:,k)
    @param k: use kth column of B
    @param xi: size N = G.m, output in xi[top..N-1]
    @param w: size 2*N, workspace, allocated if None
    @param pinv: mapping of rows to columns of G, ignored if None
    @return: top
    """
    _cs_check_solve(G, B)
    N = G.m
    xi = ialloc(N, xi)
    w = ialloc(2 * N, w, N)
    Bp, Bi = B.p, B.i
    top = N
    for p in range(Bp[k], Bp[k + 1]):
        if not w[Bi[p]]: # start a dfs at unmarked node i
            top = cs_dfs(Bi[p], G, top, xi, w, pinv)
    return top


# Sparse lower or upper triangular solve. x=G\b where G, x, and b are sparse,
# and G upper/lower triangular.

def cs_spsolve(G, B, k, x, xi=None, w=None, lo=True, pinv=None, check=False):
    """Solve Gx=b(:,k), where G is either upper (lo=false) or lower (lo=true)
    triangular.

    @param G: lower or upper triangular matrix in column-compressed form
    @param B: right hand side, b=B(:,k)
    @param k: use kth column of B as right hand side
    @param x: size N = G.m, x in x[xi[top..N-1]]
    @param xi: size N, nonzero pattern of x in xi[top..N-1]
    @param w: size 2*N, workspace
    @param lo: true if lower triangular, false if upper
    @param pinv: mapping of rows to columns of G, ignored if None
    @param check: verify the triangular structure of G first, only when pinv
    is None
    @return: top
    """
    _cs_check_solve(G, B)
    N = G.m
    x = xalloc(N, x)
    xi = ialloc(N, xi)
    w = ialloc(2 * N, w)
    if check and pinv is None:
        cs_check_triangular(G, lo)
    Gp, Gi, Gx = G.p, G.i, G.x
    Bp, Bi, Bx = B.p, B.i, B.x
    top = cs_reach(G, B, k, xi, w, pinv) # xi[top..N-1]=Reach(B(:,k))
    for p in range(top, N):
        x[xi[p]] = 0.0 # clear x
    for p in range(Bp[k], Bp[k + 1]):
        x[Bi[p]] = Bx[p] # scatter B
    for px in range(top, N):
        j = xi[px] # x(j) is nonzero
        J = pinv[j] if pinv is not None else j # j maps to col J of G
        if J < 0:
            continue # column J is empty
        if lo:
            x[j] /= Gx[Gp[J]] # L(j,j) 1st entry
            p, q = Gp[J] + 1, Gp[J + 1]
        else:
            x[j] /= Gx[Gp[J + 1] - 1] # U(j,j) last entry
            p, q = Gp[J], Gp[J + 1] - 1
        while p < q:
            x[Gi[p]] -= Gx[p] * x[j] # x(i) -= G(i,j) * x(j)
            p += 1
    return top # return top of stack


def cs_spsolve_matrix(G, B, X=None, lo=True, x=None, xi=None, w=None,
        check=False):
    """Solve GX=B column by column, where G, B and X are sparse.

    @param G: lower or upper triangular matrix in column-compressed form
    @param B: right hand side matrix
    @param X: G.m-by-B.n output matrix, allocated if None
    @param lo: true if lower triangular, false if upper
    @param x: size G.m, double workspace
    @param xi: size G.m, integer workspace
    @param w: size 2*G.m, integer workspace
    @param check: verify the triangular structure of G first
    @return: X
    """
    _cs_check_solve(G, B)
    N, n = G.m, B.n
    if X is not None and (X.m != N or X.n != n):
        raise CSShapeError("solution is %d-by-%d, output is %d-by-%d"
                % (N, n, X.m, X.n))
    x = xalloc(N, x)
    xi = ialloc(N, xi)
    w = ialloc(2 * N, w)
    if check:
        cs_check_triangular(G, lo)
    if X is None:
        X = cs_spalloc(N, n, B.p[n])
    Xp = X.p
    Xp[0] = 0
    nz = 0
    for k in range(n):
        top = cs_spsolve(G, B, k, x, xi, w, lo)
        count = N - top
        if X.nzmax < nz + count:
            cs_sprealloc(X, 2 * nz + count)
        Xi, Xx = X.i, X.x # X.i and X.x may be reallocated
        for p in range(top, N):
            Xi[nz] = xi[p]
            Xx[nz] = x[xi[p]]
            nz += 1
        Xp[k + 1] = nz
    X.nz = nz
    X.sorted = False
    return X


# Find elimination tree.

def cs_etree(A, ata=False, parent=None, w=None):
    """Compute the elimination tree of A or A'A (without forming A'A).

    Only the upper triangular part of A is used when ata is false. The tree
    satisfies parent[i] > i for every node that has a parent.

    @param A: column-compressed matrix
    @param ata: analyze A if false, A'A otherwise
    @param parent: size n, output, allocated if None
    @param w: size n (n+m if ata), workspace, allocated if None
    @return: elimination tree, parent[i] = -1 for roots
    """
    m, n = A.m, A.n
    if not ata and m != n:
        raise CSShapeError("elimination tree of A needs a square matrix, got "
                "%d-by-%d" % (m, n))
    Ap, Ai = A.p, A.i
    parent = ialloc(n, parent) # allocate result
    w = ialloc(n + (m if ata else 0), w) # get workspace
    ancestor = w
    prev = w
    prev_offset = n
    if ata:
        for i in range(m):
            prev[prev_offset + i] = -1
    for k in range(n):
        parent[k] = -1 # node k has no parent yet
        ancestor[k] = -1 # nor does k have an ancestor
        for p in range(Ap[k], Ap[k + 1]):
            i = prev[prev_offset + Ai[p]] if ata else Ai[p]
            while i != -1 and i < k: # traverse from i to k
                inext = ancestor[i] # inext = ancestor of i
                ancestor[i] = k # path compression
                if inext == -1:
                    parent[i] = k # no anc., parent is k
                    break
                i = inext
            if ata:
                prev[prev_offset + Ai[p]] = k
    return parent


# Nonzero pattern of kth row of Cholesky factor, L(k,1:k-1).

def cs_ereach(A, k, parent, s, w=None):
    """Find nonzero pattern of Cholesky L(k,1:k-1) using etree and triu(A(:,k)).
    s[top..n-1] contains pattern of L(k,:).

    @param A: column-compressed matrix; L is the Cholesky factor of A
    @param k: find kth row of L
    @param parent: elimination tree of A
    @param s: size n, s[top..n-1] is nonzero pattern of L(k,1:k-1)
    @param w: size n, work array, w[0..n-1]>=0 on input, unchanged on output
    @return: top
    """
    n = A.n
    if A.m != n:
        raise CSShapeError("expected a square matrix, got %d-by-%d" % (A.m, n))
    s = ialloc(n, s)
    w = ialloc(n, w)
    top = n
    Ap, Ai = A.p, A.i
    CS_MARK(w, k) # mark node k as visited
    for p in range(Ap[k], Ap[k + 1]):
        i = Ai[p] # A(i,k) is nonzero
        if i > k:
            continue # only use upper triangular part of A
        length = 0
        while i != -1 and not CS_MARKED(w, i): # traverse up etree
            s[length] = i # L(k,i) is nonzero
            length += 1
            CS_MARK(w, i) # mark i as visited
            i = parent[i]
        while length > 0:
            top -= 1
            length -= 1
            s[top] = s[length] # push path onto stack
    for p in range(top, n):
        CS_MARK(w, s[p]) # unmark all nodes
    CS_MARK(w, k) # unmark node k
    return top # s [top..n-1] contains pattern of L(k,:)
