'''
testing services/assignment_workflows.py
'''
import pytest

from school_portal.models.enums import ReviewPhase
from school_portal.services import assignment_workflows
from school_portal.services.assignment_workflows import (
    create_workflow_registry,
    dispose_workflow_registry,
    get_assignment_workflow,
    workflow_for,
)

from tests.constants import TEST_ADMIN_ID


@pytest.fixture
def registry():
    workflows = create_workflow_registry()
    yield workflows
    dispose_workflow_registry()


class TestWorkflowRegistry:

    def test_same_admin_gets_the_same_workflow(self, registry):
        first = workflow_for(TEST_ADMIN_ID)
        first.loading = True
        assert workflow_for(TEST_ADMIN_ID) is first
        assert workflow_for(TEST_ADMIN_ID).loading is True
        assert list(registry) == [TEST_ADMIN_ID]

    def test_admins_do_not_share_a_workflow(self, registry):
        mine = workflow_for(TEST_ADMIN_ID)
        theirs = workflow_for("ADM002")
        assert mine is not theirs
        mine.state.cancel()
        assert theirs.state.phase == ReviewPhase.DRAFTING

    def test_new_workflow_is_idle(self, registry):
        workflow = workflow_for(TEST_ADMIN_ID)
        assert workflow.loading is False
        assert workflow.state.phase == ReviewPhase.DRAFTING
        assert workflow.state.rows == {}

    def test_dependency_uses_the_session_user(self, registry, admin_session):
        assert get_assignment_workflow(admin_session) is workflow_for(admin_session.user_id)

    def test_without_lifespan_is_an_error(self):
        assert assignment_workflows.workflows is None
        with pytest.raises(RuntimeError):
            workflow_for(TEST_ADMIN_ID)

    def test_dispose_drops_every_workflow(self, registry):
        workflow_for(TEST_ADMIN_ID)
        dispose_workflow_registry()
        assert assignment_workflows.workflows is None
