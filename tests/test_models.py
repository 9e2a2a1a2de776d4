# tests/test_models.py
"""
Tests for the model registry lifecycle.

    REGISTERED --deploy--> DEPLOYED --undeploy--> UNDEPLOYED
"""

import threading

import pytest

from embedline.exceptions import (
    ExtractionError,
    InvalidStateTransitionError,
    ModelNotReadyError,
    NotFoundError,
    ReferentialIntegrityError,
)
from embedline.models import ModelState

from conftest import DIM


class TestRegister:
    def test_register_returns_registered_model(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id)

        assert cluster.models.status(model_id) is ModelState.REGISTERED
        assert cluster.models.get(model_id).connector_id == connector_id

    def test_identical_registration_is_noop(self, cluster, connector_id):
        first = cluster.models.register("embed", connector_id, description="d")
        second = cluster.models.register("embed", connector_id, description="d")

        assert first == second
        assert len(cluster.models.list()) == 1

    def test_reregistering_does_not_reset_state(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id, deploy=True)
        cluster.models.register("embed", connector_id)

        assert cluster.models.status(model_id) is ModelState.DEPLOYED

    def test_unknown_connector(self, cluster):
        with pytest.raises(NotFoundError):
            cluster.models.register("embed", "missing")

    def test_register_with_deploy(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id, deploy=True)

        assert cluster.models.status(model_id) is ModelState.DEPLOYED


class TestLifecycle:
    def test_deploy_undeploy_redeploy(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id)

        assert cluster.models.deploy(model_id).state is ModelState.DEPLOYED
        assert cluster.models.undeploy(model_id).state is ModelState.UNDEPLOYED
        assert cluster.models.deploy(model_id).state is ModelState.DEPLOYED

    def test_deploy_twice_keeps_one_deployment(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id)

        first = cluster.models.deploy(model_id)
        second = cluster.models.deploy(model_id)

        assert first.deployment == second.deployment
        assert len(cluster.models.deployments()) == 1

    def test_concurrent_deploys_converge(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id)
        barrier = threading.Barrier(16)
        results = []

        def deploy():
            barrier.wait()
            results.append(cluster.models.deploy(model_id).deployment)

        threads = [threading.Thread(target=deploy) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({d.id for d in results}) == 1
        assert len(cluster.models.deployments()) == 1
        assert cluster.models.status(model_id) is ModelState.DEPLOYED

    def test_undeploy_releases_deployment(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id, deploy=True)
        cluster.models.undeploy(model_id)

        assert cluster.models.deployments() == []

    def test_undeploy_registered_is_invalid(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id)

        with pytest.raises(InvalidStateTransitionError):
            cluster.models.undeploy(model_id)

    def test_retire_is_terminal(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id)
        cluster.models.retire(model_id)

        with pytest.raises(InvalidStateTransitionError):
            cluster.models.deploy(model_id)

    def test_cannot_retire_deployed(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id, deploy=True)

        with pytest.raises(InvalidStateTransitionError):
            cluster.models.retire(model_id)


class TestInvoke:
    def test_invoke_deployed(self, cluster, model_id):
        assert len(cluster.models.invoke(model_id, "hello")) == DIM

    @pytest.mark.parametrize("deploy", [False, True])
    def test_not_deployed(self, cluster, connector_id, transport, deploy):
        model_id = cluster.models.register("embed", connector_id, deploy=deploy)
        if deploy:
            cluster.models.undeploy(model_id)

        with pytest.raises(ModelNotReadyError):
            cluster.models.invoke(model_id, "hello")
        assert transport.requests == []

    def test_dimension_mismatch(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id, dimension=DIM + 1, deploy=True)

        with pytest.raises(ExtractionError, match="dimensions"):
            cluster.models.invoke(model_id, "hello")


class TestDelete:
    def test_delete_in_use_by_pipeline(self, cluster, model_id, pipeline_id):
        cluster.models.undeploy(model_id)

        with pytest.raises(ReferentialIntegrityError) as exc_info:
            cluster.models.delete(model_id)
        assert exc_info.value.referenced_by == [pipeline_id]

    def test_delete_unused(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id)
        cluster.models.delete(model_id)

        assert not cluster.models.exists(model_id)
        cluster.connectors.delete_connector(connector_id)

    def test_delete_deployed_fails(self, cluster, model_id):
        with pytest.raises(InvalidStateTransitionError):
            cluster.models.delete(model_id)

    def test_transitions_after_delete_report_not_found(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id)
        cluster.models.delete(model_id)

        for transition in (cluster.models.deploy, cluster.models.undeploy, cluster.models.retire):
            with pytest.raises(NotFoundError):
                transition(model_id)

    def test_transition_racing_delete_reports_not_found(self, cluster, connector_id):
        model_id = cluster.models.register("embed", connector_id)
        # A concurrent delete() can drop the lock before the transition acquires it
        cluster.models._model_locks.pop(model_id)

        with pytest.raises(NotFoundError):
            cluster.models.deploy(model_id)
