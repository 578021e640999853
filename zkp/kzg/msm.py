"""
다중 스칼라 곱셈 (Multi-Scalar Multiplication, MSM)
====================================================

    MSM([P₀, ..., P_{m-1}], [s₀, ..., s_{m-1}]) = Σᵢ sᵢ · Pᵢ

커밋먼트 C = Σ bᵢ · [Lᵢ(τ)]₁ 와 열기 증명 π = Σ qᵢ · [τⁱ]₁ 가 모두 MSM이며,
프로토콜 비용의 대부분을 차지한다.

**Pippenger 버킷 알고리즘**:
  스칼라를 c비트 윈도우로 자르고, 윈도우마다
    1. 각 점을 윈도우 값에 해당하는 버킷에 더한다 (점당 덧셈 1회)
    2. 버킷 합 Σ k · B_k 를 누적합 두 번으로 계산한다 (2^c 덧셈)
  윈도우 결과를 높은 쪽부터 2^c배 하며 합친다.
  점 하나씩 스칼라 곱셈하는 것보다 덧셈 횟수가 약 c배 적다.

입력 점은 아핀 표현(None = 항등원), 내부 누적은 야코비안 표현을 쓴다.
"""

import logging

from py_ecc import optimized_bn128 as bn128

from zkp.kzg.errors import LengthMismatch
from zkp.kzg.field import CURVE_ORDER, Z1_JACOBIAN, to_affine, to_jacobian

logger = logging.getLogger(__name__)

SCALAR_BITS = CURVE_ORDER.bit_length()


def window_bits(size):
    """입력 크기에 맞는 윈도우 비트 수 c ≈ 0.69·log2(size) + 2."""
    if size < 32:
        return 3
    return (size.bit_length() - 1) * 69 // 100 + 2


def msm(bases, scalars):
    """Σ scalars[i] · bases[i] 를 계산한다.

    Args:
        bases: 아핀 G1 점 리스트
        scalars: FR 원소(또는 정수) 리스트

    Returns:
        아핀 G1 점 (결과가 항등원이면 None)

    Raises:
        LengthMismatch: 두 리스트의 길이가 다를 때
    """
    if len(bases) != len(scalars):
        raise LengthMismatch("MSM 입력", len(bases), len(scalars))

    pairs = []
    for base, scalar in zip(bases, scalars):
        s = int(scalar) % CURVE_ORDER
        if s and base is not None:
            pairs.append((to_jacobian(base), s))
    if not pairs:
        return None

    c = window_bits(len(pairs))
    mask = (1 << c) - 1
    logger.debug("MSM: %d terms, window %d bits", len(pairs), c)

    window_sums = []
    for shift in range(0, SCALAR_BITS, c):
        buckets = [Z1_JACOBIAN] * mask
        for point, s in pairs:
            k = (s >> shift) & mask
            if k:
                buckets[k - 1] = bn128.add(buckets[k - 1], point)

        # Σ k · B_k = Σ_{j} (B_mask + ... + B_j)
        running = Z1_JACOBIAN
        total = Z1_JACOBIAN
        for bucket in reversed(buckets):
            running = bn128.add(running, bucket)
            total = bn128.add(total, running)
        window_sums.append(total)

    result = Z1_JACOBIAN
    for total in reversed(window_sums):
        for _ in range(c):
            result = bn128.double(result)
        result = bn128.add(result, total)
    return to_affine(result)
