"""
KZG 신뢰 설정 (Trusted Setup)
==============================

비밀 값 τ ("toxic waste")로 구조화 참조 문자열(SRS)을 생성한다.

  srs_monomial = [G, τ·G, τ²·G, ..., τ^(2n-1)·G]        (단항식 기저)
  srs_lagrange = [L₀(τ)·G, L₁(τ)·G, ..., L_{2n-1}(τ)·G]  (Lagrange 기저)
  g2, tau_g2   = H, τ·H
  c_blind      = 2n개의 독립 난수 (블라인딩 벡터, τ와 무관)

G ∈ G1, H ∈ G2는 표준 생성자가 아니라 설정마다 새로 뽑는 난수 생성자이다.

**τ 거듭제곱의 윈도우 분해**:
  τ^i = (τ^W)^⌊i/W⌋ · τ^(i mod W)
  window_bases[k] = (τ^W)^k 만 순차로 계산하면, 각 인덱스 i는 서로 독립적으로
  (최대 W-1번의 곱셈으로) 계산할 수 있다. 결과는 순차 곱셈과 정확히 같다.

**보안**:
  τ는 Setup.generate 안에서만 존재하며 반환, 저장, 로깅되지 않는다.
  실제 시스템에서는 MPC 세리머니로 τ를 생성해야 한다.

사용 예시:
    >>> setup = Setup.generate(Config(log_n=3))
    >>> len(setup.srs_monomial)  # 16 (= 2 · 2^3)
"""

import logging
import random
import time
from functools import partial

from py_ecc import optimized_bn128 as bn128

from zkp.kzg.config import DEFAULT_WINDOW_SIZE, SEQUENTIAL_POWERS_THRESHOLD
from zkp.kzg.domain import EvaluationDomain
from zkp.kzg.errors import LengthMismatch
from zkp.kzg.field import (
    FR, ec_mul, random_g1, random_g2, random_scalar, to_affine, to_jacobian,
)
from zkp.kzg.parallel import parallel_map, parallel_ranges

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# τ 거듭제곱
# ─────────────────────────────────────────────────────────────────────

def _sequential_powers(tau, count):
    powers = [FR(1)]
    for _ in range(1, count):
        powers.append(powers[-1] * tau)
    return powers[:count]


def _windowed_powers_chunk(tau, window_bases, window_size, start, stop):
    """인덱스 start..stop-1의 τ^i. 각 인덱스는 독립적으로 계산된다."""
    powers = []
    for i in range(start, stop):
        base = window_bases[i // window_size]
        offset = i % window_size
        if offset == 0:
            powers.append(base)
            continue
        tau_offset = FR(1)
        for _ in range(offset):
            tau_offset = tau_offset * tau
        powers.append(base * tau_offset)
    return powers


def compute_powers(tau, count, window_size=DEFAULT_WINDOW_SIZE, workers=None,
                   sequential_threshold=SEQUENTIAL_POWERS_THRESHOLD):
    """[τ^0, τ^1, ..., τ^(count-1)]을 계산한다.

    count가 sequential_threshold 이하이면 순차 곱셈, 그보다 크면 윈도우 분해로
    인덱스별 독립 계산을 병렬 실행한다.
    """
    if count <= 0:
        return []
    if count == 1:
        return [FR(1)]
    if count <= sequential_threshold:
        return _sequential_powers(tau, count)

    num_windows = (count + window_size - 1) // window_size
    tau_window = FR(1)
    for _ in range(window_size):
        tau_window = tau_window * tau

    window_bases = [FR(1)]
    for _ in range(1, num_windows):
        window_bases.append(window_bases[-1] * tau_window)

    chunk = partial(_windowed_powers_chunk, tau, window_bases, window_size)
    return parallel_ranges(chunk, count, workers=workers)


# ─────────────────────────────────────────────────────────────────────
# 병렬 구간 작업 단위
# ─────────────────────────────────────────────────────────────────────

def _scale_point(point, scalar):
    """야코비안 점 · 스칼라 (단항식 SRS 원소 하나)."""
    return bn128.multiply(point, int(scalar))


def _random_scalars_chunk(start, stop):
    # 청크마다 독립된 생성기 인스턴스
    rng = random.SystemRandom()
    return [random_scalar(rng) for _ in range(start, stop)]


# ─────────────────────────────────────────────────────────────────────
# Setup
# ─────────────────────────────────────────────────────────────────────

class Setup:
    """KZG 공개 파라미터. 생성 후 읽기 전용이며 Prover와 Verifier가 참조로 공유한다.

    속성:
        config: Config
        srs_lagrange: Lagrange 기저 SRS (아핀 G1 점 2n개, tuple)
        srs_monomial: 단항식 기저 SRS (아핀 G1 점 2n개, tuple)
        g2: 난수 G2 생성자 H
        tau_g2: τ·H
        c_blind: 블라인딩 벡터 (FR 원소 2n개, tuple)
        domain: 크기 2n의 EvaluationDomain

    Raises:
        InvalidDomainSize: 2n 크기의 FFT 도메인을 만들 수 없을 때
        LengthMismatch: 벡터 길이가 config.two_n과 다를 때
    """

    def __init__(self, config, srs_lagrange, srs_monomial, g2, tau_g2, c_blind):
        self._domain = EvaluationDomain(config.two_n)
        for name, vector in (("srs_lagrange", srs_lagrange),
                             ("srs_monomial", srs_monomial),
                             ("c_blind", c_blind)):
            if len(vector) != config.two_n:
                raise LengthMismatch(name, config.two_n, len(vector))
        self._config = config
        self._srs_lagrange = tuple(srs_lagrange)
        self._srs_monomial = tuple(srs_monomial)
        self._g2 = g2
        self._tau_g2 = tau_g2
        self._c_blind = tuple(c_blind)

    @property
    def config(self):
        return self._config

    @property
    def domain(self):
        return self._domain

    @property
    def srs_lagrange(self):
        return self._srs_lagrange

    @property
    def srs_monomial(self):
        return self._srs_monomial

    @property
    def g1(self):
        """단항식 SRS의 첫 원소 τ^0·G = G."""
        return self._srs_monomial[0]

    @property
    def g2(self):
        return self._g2

    @property
    def tau_g2(self):
        return self._tau_g2

    @property
    def c_blind(self):
        return self._c_blind

    def __repr__(self):
        return f"Setup(log_n={self._config.log_n}, two_n={self._config.two_n})"

    @classmethod
    def generate(cls, config, rng=None):
        """새 난수로 SRS를 생성한다.

        Args:
            config: Config
            rng: randrange를 가진 난수 생성기 (테스트 재현용).
                 None이면 OS CSPRNG를 사용하고 블라인딩 벡터를 병렬로 뽑는다.

        Returns:
            Setup
        """
        two_n = config.two_n
        workers = config.workers
        logger.info("Starting setup for n = 2^%d (domain size %d)", config.log_n, two_n)
        start = time.perf_counter()

        # 도메인을 먼저 만들어 크기 오류를 무거운 계산 전에 드러낸다
        domain = EvaluationDomain(two_n)

        # 1. toxic waste τ
        tau = random_scalar(rng)

        # 2. τ^0 .. τ^(2n-1)
        logger.info("Computing powers of tau")
        tau_powers = compute_powers(tau, two_n, workers=workers)

        # 3. 난수 생성자 G ∈ G1, H ∈ G2
        g1 = random_g1(rng)
        g2 = random_g2(rng)

        # 4. 단항식 SRS: τ^i · G
        logger.info("Computing SRS in monomial basis")
        srs_monomial_jac = parallel_map(
            partial(_scale_point, to_jacobian(g1)), tau_powers, workers=workers
        )
        srs_monomial = parallel_map(to_affine, srs_monomial_jac, workers=workers)

        # 5. Lagrange SRS: 단항식 SRS에 그룹 IFFT
        logger.info("Converting SRS to Lagrange basis")
        srs_lagrange = parallel_map(
            to_affine, domain.ifft_group(srs_monomial_jac, workers=workers), workers=workers
        )

        # 6. 블라인딩 벡터 (τ와 독립)
        if rng is None:
            c_blind = parallel_ranges(_random_scalars_chunk, two_n, workers=workers)
        else:
            c_blind = [random_scalar(rng) for _ in range(two_n)]

        # 7. τ·H
        tau_g2 = ec_mul(g2, tau)
        del tau, tau_powers

        logger.info("Setup completed in %.2fs", time.perf_counter() - start)
        return cls(config, srs_lagrange, srs_monomial, g2, tau_g2, c_blind)
