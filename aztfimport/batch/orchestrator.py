"""Non-interactive batch import."""
from enum import Enum
from typing import Callable, List, Optional

from ..config.schema import RunConfig
from ..errors import GenerationError, InitializationError, ResourceImportError, RunStateError
from ..meta.engine import ImportEngine, TerraformImportEngine
from ..meta.models import BatchResult, ImportOutcome, ResourceRecord
from ..runlog import RunLogger

EngineFactory = Callable[[RunConfig, RunLogger], ImportEngine]


class RunState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    DISCOVERED = "discovered"
    IMPORTING = "importing"
    ABORTED = "aborted"
    READY_TO_GENERATE = "ready_to_generate"
    GENERATED = "generated"
    GENERATION_FAILED = "generation_failed"


class BatchOrchestrator:
    """Drives one sequential discover, import, generate pass over a resource group.

    Resources are imported one at a time in discovery order. A failed import
    aborts the run unless ``continue_on_error`` is set, in which case it is
    logged and the run goes on. Configuration is generated once, over the
    full record set, only when the import phase was not aborted.
    """

    def __init__(self, logger: RunLogger, continue_on_error: bool = False,
                 engine_factory: Optional[EngineFactory] = None):
        """Initialize the orchestrator.

        Args:
            logger: Run logger for progress.
            continue_on_error: Keep importing past failed resources.
            engine_factory: Builds the import engine from the run config.
        """
        self.logger = logger
        self.continue_on_error = continue_on_error
        self.engine_factory = engine_factory or TerraformImportEngine
        self.engine: Optional[ImportEngine] = None
        self.state = RunState.UNINITIALIZED

    def _expect(self, *states: RunState) -> None:
        if self.state not in states:
            expected = " or ".join(s.value for s in states)
            raise RunStateError(f"run is {self.state.value}, expected {expected}")

    def run(self, config: RunConfig) -> BatchResult:
        """Run the full pipeline.

        Returns:
            BatchResult: Records and generated files of a successful run.

        Raises:
            InitializationError: If the engine cannot be initialized.
            ResourceImportError: If an import fails and continue_on_error is off.
            GenerationError: If configuration generation fails.
        """
        self.initialize(config)
        records = self.discover()
        self.run_import_phase(records)
        self.log_summary(records)
        generated = self.generate_configuration(records)
        return BatchResult(records, generated)

    def initialize(self, config: RunConfig) -> ImportEngine:
        self._expect(RunState.UNINITIALIZED)

        self.logger.info("Create import engine")
        try:
            engine = self.engine_factory(config, self.logger)
            self.logger.info("Initialize")
            engine.init()
        except InitializationError:
            raise
        except Exception as e:
            raise InitializationError(f"initializing import engine: {e}") from e

        self.engine = engine
        self.state = RunState.INITIALIZED
        return engine

    def discover(self) -> List[ResourceRecord]:
        self._expect(RunState.INITIALIZED)

        self.logger.info("List resources")
        records = list(self.engine.list_resources())
        self.state = RunState.DISCOVERED
        return records

    def run_import_phase(self, records: List[ResourceRecord], continue_on_error: Optional[bool] = None) -> None:
        """Import every mapped record in order.

        Raises:
            ResourceImportError: On the first failure when not continuing on error.
        """
        self._expect(RunState.DISCOVERED)
        if continue_on_error is None:
            continue_on_error = self.continue_on_error
        self.state = RunState.IMPORTING

        self.logger.info("Import resources")
        for record in records:
            if not record.mapping_present:
                self.logger.warn(f"No mapping information for resource: {record.resource_id}, skip it")
                record.record(ImportOutcome.skipped())
                continue

            self.logger.info(f"Importing {record.resource_id} as {record.target_address}")
            record.record(self.engine.import_resource(record))

            if record.outcome.is_failed:
                error = ResourceImportError(record.resource_id, record.target_address, record.import_error)
                if not continue_on_error:
                    self.state = RunState.ABORTED
                    raise error
                self.logger.error(str(error))

        self.state = RunState.READY_TO_GENERATE

    def log_summary(self, records: List[ResourceRecord]) -> None:
        result = BatchResult(records)
        message = (f"Imported {result.imported}, skipped {result.skipped}, "
                   f"failed {result.failed} of {len(records)} resources")
        if result.failed:
            self.logger.warn(message)
        else:
            self.logger.info(message)

    def generate_configuration(self, records: List[ResourceRecord]) -> List[str]:
        """Generate configuration for the full record set.

        Raises:
            GenerationError: If generation fails.
        """
        self._expect(RunState.READY_TO_GENERATE)

        self.logger.info("Generate Terraform configurations")
        try:
            generated = self.engine.generate_config(records)
        except Exception as e:
            self.state = RunState.GENERATION_FAILED
            raise GenerationError(e) from e

        self.state = RunState.GENERATED
        for path in generated:
            self.logger.info(f"Wrote {path}")
        return generated
