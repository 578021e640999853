"""
KZG 데모 흐름
=============

Setup → Prover.prove → 난수 점 3개에서 열기 → 검증 → 조작된 증명 검증.
데모 서비스(kzg_routes)와 테스트에서 사용한다.
"""

import dataclasses
import logging

from zkp.kzg.field import random_scalar
from zkp.kzg.prover import Prover
from zkp.kzg.setup import Setup
from zkp.kzg.verifier import Verifier

logger = logging.getLogger(__name__)

NUM_OPENINGS = 3


def run_demo(config, rng=None):
    """데모 흐름을 실행하고 검증 결과를 반환한다.

    Returns:
        dict: {"openings": [bool, bool, bool], "tampered": bool}
              정상이면 openings는 모두 True, tampered는 False.
    """
    setup = Setup.generate(config, rng=rng)
    prover = Prover(setup)
    verifier = Verifier(setup)

    commitment, evals = prover.prove(rng=rng)

    results = []
    for i in range(NUM_OPENINGS):
        opening = prover.create_opening_proof(evals, random_scalar(rng))
        results.append(verifier.verify_opening(commitment, opening))
        logger.info("Opening #%d verified: %s", i + 1, results[-1])

    opening = prover.create_opening_proof(evals, random_scalar(rng))
    tampered = dataclasses.replace(opening, evaluation=random_scalar(rng))
    tampered_result = verifier.verify_opening(commitment, tampered)
    logger.info("Tampered opening verified: %s", tampered_result)

    return {"openings": results, "tampered": tampered_result}
