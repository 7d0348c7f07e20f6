"""
Builds the jury "deliberation" transcript shown while results are revealed.

Each message is derived from the agent scores only, so the same result
always yields the same conversation.
"""
from typing import List

from agent_jury.models.evaluation import AgentResults, DeliberationMessage, Verdict
from agent_jury.services.scoring_service import compute_final_score, derive_verdict, score_label

JUDGE_CLOSINGS = {
    Verdict.SHIP_MVP: ("VERDICT: SHIP", "Agents reach consensus: strong candidate. Proceeding to full report."),
    Verdict.ITERATE_FIRST: ("VERDICT: ITERATE", "Mixed signals. Viable with iteration. Proceeding to full report."),
    Verdict.REJECT: ("VERDICT: REJECT", "Critical concerns flagged. Significant rework required. Proceeding to full report."),
}


def _first(items: List[str], fallback: str) -> str:
    return items[0] if items else fallback


def _opening_messages(agents: AgentResults) -> List[DeliberationMessage]:
    f, i, r = agents.feasibility.score, agents.innovation.score, agents.risk.score

    if f >= 70:
        f_text = "Technical stack looks proven. Scanning integration points and architecture..."
    elif f >= 50:
        f_text = "Architecture shows promise. Running integration analysis, some complexity detected."
    else:
        f_text = "Detecting significant technical hurdles. Assessing feasibility ceiling..."

    if i >= 65:
        i_text = "Interesting concept geometry. Running differentiation scan against known patterns..."
    elif i >= 40:
        i_text = "Familiar pattern signatures detected. Measuring novelty delta against baseline..."
    else:
        i_text = "High overlap with existing solutions. Evaluating unique value proposition..."

    if r <= 35:
        r_text = "Ethics and security scan initiated. Early signals nominal, no critical flags..."
    elif r <= 60:
        r_text = "Moderate risk signals detected. Running mitigation pathway analysis..."
    else:
        r_text = "Elevated risk profile confirmed. Initiating deep security and ethics review..."

    return [
        DeliberationMessage(id=0, agent="feasibility", text=f_text),
        DeliberationMessage(id=1, agent="innovation", text=i_text),
        DeliberationMessage(id=2, agent="risk", text=r_text),
    ]


def _verdict_messages(agents: AgentResults) -> List[DeliberationMessage]:
    f, i, r = agents.feasibility, agents.innovation, agents.risk

    if f.score >= 70:
        f_tag = "PASS"
        f_text = f"Score {f.score}/100 ({score_label(f.score)}). {_first(f.pros, 'Solid technical foundation')}. Integration path is clear."
    elif f.score >= 50:
        f_tag = "PARTIAL"
        f_text = f"Score {f.score}/100 ({score_label(f.score)}). Feasible with scoping. Key strength: {_first(f.pros, 'workable approach')}."
    else:
        f_tag = "FLAG"
        f_text = f"Score {f.score}/100 ({score_label(f.score)}). Blockers: {_first(f.cons, 'complex implementation')}. Significant compromises needed."

    if i.score >= 65:
        i_tag = "NOVEL"
        i_text = f"Score {i.score}/100 ({score_label(i.score)}). {_first(i.pros, 'Novel mechanic identified')} creates a differentiated interaction paradigm."
    elif i.score >= 40:
        i_tag = "INCREMENTAL"
        i_text = f"Score {i.score}/100 ({score_label(i.score)}). Incremental improvement. {_first(i.pros, 'Familiar patterns present')}."
    else:
        i_tag = "COMMON"
        i_text = f"Score {i.score}/100 ({score_label(i.score)}). {_first(i.cons, 'Well-trodden territory')} with limited differentiation."

    if r.score <= 35:
        r_tag = "SAFE"
        r_text = f"Risk index {r.score}/100. Minimal exposure, standard practices sufficient. No critical concerns."
    elif r.score <= 60:
        r_tag = "MODERATE"
        r_text = f"Risk index {r.score}/100. Manageable. Primary concern: {_first(r.cons, 'requires careful design')}."
    else:
        r_tag = "ELEVATED"
        r_text = f"Risk index {r.score}/100. Significant issues: {_first(r.cons, 'requires strong safeguards')}."

    return [
        DeliberationMessage(id=3, agent="feasibility", tag=f_tag, text=f_text),
        DeliberationMessage(id=4, agent="innovation", tag=i_tag, text=i_text),
        DeliberationMessage(id=5, agent="risk", tag=r_tag, text=r_text),
    ]


def _judge_message(agents: AgentResults) -> DeliberationMessage:
    final_score = compute_final_score(agents.feasibility.score, agents.innovation.score, agents.risk.score)
    tag, closing = JUDGE_CLOSINGS[derive_verdict(final_score)]

    text = (
        "Weighted synthesis complete. Feasibility x0.45 + Innovation x0.35 + Safety x0.20 "
        f"-> {final_score}/100. {closing}"
    )
    return DeliberationMessage(id=6, agent="judge", tag=tag, text=text)


def build_deliberation(agents: AgentResults) -> List[DeliberationMessage]:
    """Opening analysis, per-agent verdicts, then the judge's synthesis."""
    return _opening_messages(agents) + _verdict_messages(agents) + [_judge_message(agents)]
