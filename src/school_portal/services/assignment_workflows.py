'''
Fee assignment workflows that outlive a single request.
1- workflows: one AssignmentWorkflow per administrator
2- create_workflow_registry / dispose_workflow_registry: called by the app's lifespan
3- get_assignment_workflow: dependency handing the caller's workflow to the service
'''
from typing import Annotated

from fastapi import Depends

from ..core.assignment_review import AssignmentReviewState
from ..models.user import Session
from ..common.logger import log
from .security import get_current_session


class AssignmentWorkflow:
    """
    The review table of one administrator's assignment form and whether a
    roster fetch or submission of it is still outstanding.
    """
    def __init__(self):
        self.state = AssignmentReviewState()
        self.loading = False


# Created by the app's lifespan, keyed by user id.
workflows: dict[str, AssignmentWorkflow] | None = None

def create_workflow_registry() -> dict[str, AssignmentWorkflow]:
    global workflows
    workflows = {}
    log.info("Fee assignment workflow registry created.")
    return workflows

def dispose_workflow_registry():
    global workflows
    if workflows:
        log.info(f"Discarding {len(workflows)} fee assignment workflows.")
    workflows = None

def workflow_for(user_id: str) -> AssignmentWorkflow:
    if workflows is None:
        log.error("Workflow registry is not initialized. App lifespan may not have run.")
        raise RuntimeError("Workflow registry is not available.")
    if user_id not in workflows:
        workflows[user_id] = AssignmentWorkflow()
    return workflows[user_id]

def get_assignment_workflow(
    session: Annotated[Session, Depends(get_current_session)]
) -> AssignmentWorkflow:
    """
    FastAPI dependency: the caller's workflow, shared by all of their
    requests so an outstanding submission blocks the next one.
    """
    return workflow_for(session.user_id)
