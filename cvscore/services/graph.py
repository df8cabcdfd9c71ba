from typing import Any, Dict, TypedDict

from langgraph.graph import StateGraph, END

from cvscore.models.models import ExportBundle, RawTrees, SourceFiles
from cvscore.services.normalizer import normalize_candidate, normalize_job, normalize_score
from cvscore.services.textkernel import TextkernelClient
from cvscore.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)


class ScoringState(TypedDict, total=False):
    cv_base64: str
    job_base64: str
    cv_name: str
    job_name: str
    resume_value: Dict[str, Any]
    job_value: Dict[str, Any]
    score_value: Dict[str, Any]
    bundle: ExportBundle


def build_graph(client: TextkernelClient):
    """parse_resume -> parse_job_order -> score -> normalize, strictly in sequence"""

    def node_parse_resume(state: ScoringState):
        logger.info(f"Parsing CV {state.get('cv_name', '')}")
        return {"resume_value": client.parse_resume(state["cv_base64"])}

    def node_parse_job_order(state: ScoringState):
        logger.info(f"Parsing job description {state.get('job_name', '')}")
        return {"job_value": client.parse_job(state["job_base64"])}

    def node_score(state: ScoringState):
        return {"score_value": client.score(state["resume_value"], state["job_value"])}

    def node_normalize(state: ScoringState):
        resume_value = state.get("resume_value", {})
        job_value = state.get("job_value", {})
        score_value = state.get("score_value", {})
        bundle = ExportBundle(
            candidate=normalize_candidate(resume_value),
            job=normalize_job(job_value),
            score=normalize_score(score_value),
            files=SourceFiles(cv_name=state.get("cv_name", ""), job_name=state.get("job_name", "")),
            raw=RawTrees(resume=resume_value, job=job_value, score=score_value),
        )
        return {"bundle": bundle}

    g = StateGraph(ScoringState)
    g.add_node("parse_resume", node_parse_resume)
    g.add_node("parse_job_order", node_parse_job_order)
    g.add_node("score", node_score)
    g.add_node("normalize", node_normalize)
    g.set_entry_point("parse_resume")
    g.add_edge("parse_resume", "parse_job_order")
    g.add_edge("parse_job_order", "score")
    g.add_edge("score", "normalize")
    g.add_edge("normalize", END)
    return g.compile()


@log_function_call
def run_scoring(client: TextkernelClient, cv_base64: str, job_base64: str,
                cv_name: str = "", job_name: str = "") -> ExportBundle:
    graph = build_graph(client)
    final = graph.invoke({
        "cv_base64": cv_base64,
        "job_base64": job_base64,
        "cv_name": cv_name,
        "job_name": job_name,
    })
    return final["bundle"]
