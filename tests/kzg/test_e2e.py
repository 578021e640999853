"""
End-to-End Integration Tests
=============================

Setup → prove → open → verify 전체 흐름.

  - 여러 크기의 Config에서 완전성
  - 데모 흐름 (run_demo)
  - 시나리오: log_n=10, 세 점 열기 후 하나만 비트 반전 (slow)
  - 운영 크기: log_n=17 (slow)
"""

import dataclasses
import random

import pytest

from zkp.kzg.config import Config
from zkp.kzg.demo import NUM_OPENINGS, run_demo
from zkp.kzg.field import FR, random_scalar
from zkp.kzg.prover import Prover
from zkp.kzg.setup import Setup
from zkp.kzg.verifier import Verifier


def _run(config, points):
    setup = Setup.generate(config)
    prover = Prover(setup)
    verifier = Verifier(setup)
    commitment, evals = prover.prove()
    openings = [prover.create_opening_proof(evals, z) for z in points]
    return setup, verifier, commitment, openings


class TestPipeline:
    @pytest.mark.parametrize("log_n", [1, 3])
    def test_completeness_across_configs(self, log_n):
        config = Config(log_n=log_n, workers=1)
        rng = random.Random(log_n)
        setup, verifier, commitment, openings = _run(config, [random_scalar(rng)])
        assert commitment is not None
        assert all(verifier.verify_opening(commitment, o) for o in openings)

    def test_domain_and_non_domain_points(self):
        config = Config(log_n=1, workers=1)
        setup = Setup.generate(config)
        prover = Prover(setup)
        verifier = Verifier(setup)
        commitment, evals = prover.prove()
        for z in setup.domain.elements() + [FR(2), FR(123456789)]:
            assert verifier.verify_opening(commitment, prover.create_opening_proof(evals, z))

    def test_opening_does_not_verify_against_other_commitment(self):
        config = Config(log_n=1, workers=1)
        setup = Setup.generate(config)
        prover = Prover(setup)
        verifier = Verifier(setup)
        commitment_a, evals_a = prover.prove()
        commitment_b, _ = prover.prove()
        opening = prover.create_opening_proof(evals_a, FR(77))
        assert verifier.verify_opening(commitment_a, opening)
        assert not verifier.verify_opening(commitment_b, opening)

    def test_process_pool_pipeline(self):
        """two_n = 512: setup의 단항식 SRS와 그룹 IFFT 스케일링이 프로세스 풀을 거친다."""
        config = Config(log_n=8, workers=2)
        rng = random.Random(8)
        setup, verifier, commitment, openings = _run(config, [random_scalar(rng), FR(3)])
        assert len(setup.srs_lagrange) == 512
        assert all(verifier.verify_opening(commitment, o) for o in openings)

    def test_demo_flow(self):
        result = run_demo(Config(log_n=1, workers=1), rng=random.Random(5))
        assert result["openings"] == [True] * NUM_OPENINGS
        assert result["tampered"] is False


@pytest.mark.slow
class TestFullSize:
    def test_scenario_log_n_10(self):
        config = Config(log_n=10)
        assert config.n == 1024
        rng = random.Random(10)
        _, verifier, commitment, openings = _run(config, [random_scalar(rng) for _ in range(3)])
        assert [verifier.verify_opening(commitment, o) for o in openings] == [True, True, True]

        flipped = FR(int(openings[1].evaluation) ^ 1)
        openings[1] = dataclasses.replace(openings[1], evaluation=flipped)
        assert [verifier.verify_opening(commitment, o) for o in openings] == [True, False, True]

    def test_production_size(self):
        config = Config.production()
        assert config.n == 131072
        assert config.two_n == 262144
        setup, verifier, commitment, openings = _run(config, [random_scalar()])
        assert len(setup.srs_lagrange) == 262144
        assert verifier.verify_opening(commitment, openings[0])
