from agent_jury.core.config import AGENT_EXECUTION_MODE
from agent_jury.models.evaluation import AgentResults, EvaluateResponse
from agent_jury.services.agent_service import AGENT_KEYS, AgentService
from agent_jury.services.llm_service import create_llm_client
from agent_jury.services.scoring_service import compute_final_score, derive_verdict
from concurrent.futures import ThreadPoolExecutor, as_completed


class JuryService:
    """
    Convenes the three agents on a case and combines their scores:
    1. Feasibility, innovation and risk agents score the case
       (in parallel, or one after another in sequential mode)
    2. Weighted final score (risk counts inverted)
    3. Verdict from the final score thresholds
    """

    def __init__(self, agent_service: AgentService = None, execution_mode: str = None):
        self.agents = agent_service or AgentService(create_llm_client())
        self.execution_mode = (execution_mode or AGENT_EXECUTION_MODE).lower()
        if self.execution_mode not in ("parallel", "sequential"):
            raise ValueError(f"Unknown AGENT_EXECUTION_MODE '{self.execution_mode}'. Use 'parallel' or 'sequential'.")

    def evaluate(self, case_text: str) -> EvaluateResponse:
        """
        Run the full evaluation for one case.

        Args:
            case_text (str): The idea description submitted by the user

        Returns:
            EvaluateResponse: Agent results, final score and verdict
        """
        print(f"[Agent Jury] Running {len(AGENT_KEYS)} agents ({self.execution_mode})...")

        if self.execution_mode == "parallel":
            results = self._run_parallel(case_text)
        else:
            results = {key: self.agents.run_agent(key, case_text) for key in AGENT_KEYS}

        agents = AgentResults(**results)
        final_score = compute_final_score(
            agents.feasibility.score,
            agents.innovation.score,
            agents.risk.score
        )
        verdict = derive_verdict(final_score)

        print(
            f"[Agent Jury] Done. Scores: F={agents.feasibility.score} I={agents.innovation.score} "
            f"R={agents.risk.score} -> Final={final_score} ({verdict.value})"
        )

        return EvaluateResponse(agents=agents, final_score=final_score, verdict=verdict)

    def _run_parallel(self, case_text: str) -> dict:
        # The first agent to fail aborts the evaluation without waiting for the others
        pool = ThreadPoolExecutor(max_workers=len(AGENT_KEYS))
        try:
            futures = {key: pool.submit(self.agents.run_agent, key, case_text) for key in AGENT_KEYS}
            for future in as_completed(futures.values()):
                error = future.exception()
                if error is not None:
                    raise error
            return {key: future.result() for key, future in futures.items()}
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
