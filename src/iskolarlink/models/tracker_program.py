"""Budget programs and their per-program naming."""

import enum
from dataclasses import dataclass


class TrackerProgram(str, enum.Enum):
    """Budget program a tracker record belongs to."""

    ALLOWANCE = "allowance"
    BOOK_REIMBURSEMENT = "book_reimbursement"
    TUITION_PAYMENT = "tuition_payment"
    TUITION_REIMBURSEMENT = "tuition_reimbursement"


@dataclass(frozen=True)
class ProgramConfig:
    """Cosmetic differences between programs; the tracker algorithm is shared."""

    program: TrackerProgram
    title: str
    url_prefix: str
    consume_verb: str
    consume_label: str
    consumed_noun: str


PROGRAM_CONFIGS = {
    TrackerProgram.ALLOWANCE: ProgramConfig(
        program=TrackerProgram.ALLOWANCE,
        title="Allowance",
        url_prefix="/allowances",
        consume_verb="given",
        consume_label="Given",
        consumed_noun="given",
    ),
    TrackerProgram.BOOK_REIMBURSEMENT: ProgramConfig(
        program=TrackerProgram.BOOK_REIMBURSEMENT,
        title="Book Reimbursement",
        url_prefix="/book",
        consume_verb="reimburse",
        consume_label="Reimbursed",
        consumed_noun="reimbursed",
    ),
    TrackerProgram.TUITION_PAYMENT: ProgramConfig(
        program=TrackerProgram.TUITION_PAYMENT,
        title="Tuition Payment",
        url_prefix="/tuition",
        consume_verb="pay",
        consume_label="Paid",
        consumed_noun="paid",
    ),
    TrackerProgram.TUITION_REIMBURSEMENT: ProgramConfig(
        program=TrackerProgram.TUITION_REIMBURSEMENT,
        title="Tuition Reimbursement",
        url_prefix="/tuition-reimbursement",
        consume_verb="reimburse",
        consume_label="Reimbursed",
        consumed_noun="reimbursed",
    ),
}


def get_program_config(program: TrackerProgram) -> ProgramConfig:
    return PROGRAM_CONFIGS[TrackerProgram(program)]
