"""
Cloud OCI Provider

Implements the Oracle Cloud Infrastructure pairing: OCI AI Speech for
transcription and OCI AI Language for translation.

OCI Speech has no Haitian Creole model, so the recording is transcribed as
French (the closest supported language) and translated from French. Every
result is annotated with this substitution.

OCI Speech only reads audio from Object Storage and runs as an asynchronous
job, so one request:
1. ensures the staging bucket exists (creating it when missing)
2. uploads the recording under a unique object name
3. submits a transcription job writing to a unique output prefix
4. polls the job at a fixed interval until it succeeds, fails or times out
5. finds the JSON result under the output prefix and parses it
6. deletes the uploaded audio and the job output

The OCI SDK is synchronous; every call runs in a worker thread.

Provider ID: oci
"""
import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from relay.audio.ingest import TemporaryArtifacts
from relay.config import RelayConfig
from relay.errors import ProviderError, ProviderNotAvailableError
from relay.jobs import JobPoller, JobStatus, map_lifecycle_state
from relay.models import ProviderCredentials
from relay.normalize import HAITIAN_CREOLE, text_from_oci_speech_output
from relay.providers.base import TranslationProvider

logger = logging.getLogger(__name__)

SUBSTITUTION_NOTE = (
    "OCI Speech does not natively support Haitian Creole; "
    "French was used as the closest available language."
)


@dataclass
class OCIClients:
    """Per-request OCI service clients."""
    speech: Any
    language: Any
    storage: Any
    compartment_id: str


class CloudOCIProvider(TranslationProvider):
    """OCI AI Speech (as French) + OCI AI Language.

    Credentials:
        ociConfigPath: OCI SDK config file (required)
        ociProfile: Profile within the config file
        ociApiKey: Path to an API signing key overriding the profile's key_file
    """

    name = "oci"
    label = "OCI"
    required_credentials = ("ociConfigPath",)
    optional_credentials = ("ociProfile", "ociApiKey")
    language = f"{HAITIAN_CREOLE} (processed as French)"

    def __init__(
        self,
        config: RelayConfig,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        super().__init__(config)
        self._clock = clock
        self._sleep = sleep

    def _create_clients(self, credentials: ProviderCredentials) -> OCIClients:
        """Build speech, language and storage clients from the OCI config file."""
        try:
            import oci
        except ImportError:
            raise ProviderNotAvailableError(
                self.name, "oci package not installed. Install with: pip install oci"
            )

        oci_config = oci.config.from_file(
            file_location=credentials.require("ociConfigPath"),
            profile_name=credentials.get("ociProfile") or self.config.oci.profile,
        )
        if credentials.get("ociApiKey"):
            oci_config["key_file"] = credentials["ociApiKey"]

        timeout = self.config.http_timeout
        return OCIClients(
            speech=oci.ai_speech.AIServiceSpeechClient(oci_config, timeout=timeout),
            language=oci.ai_language.AIServiceLanguageClient(oci_config, timeout=timeout),
            storage=oci.object_storage.ObjectStorageClient(oci_config, timeout=timeout),
            compartment_id=self.config.oci.compartment_id or oci_config["tenancy"],
        )

    def _request_clients(self, credentials: ProviderCredentials, artifacts: TemporaryArtifacts) -> OCIClients:
        return artifacts.shared("oci", lambda: self._create_clients(credentials))

    async def _namespace(self, clients: OCIClients) -> str:
        if self.config.oci.namespace:
            return self.config.oci.namespace
        logger.info("OCI: Getting namespace...")
        response = await asyncio.to_thread(clients.storage.get_namespace)
        return response.data

    async def _ensure_bucket(self, clients: OCIClients, namespace: str) -> None:
        import oci

        bucket_name = self.config.oci.bucket_name
        try:
            await asyncio.to_thread(clients.storage.get_bucket, namespace, bucket_name)
            logger.debug("OCI: Bucket exists")
        except oci.exceptions.ServiceError as e:
            if e.status != 404:
                raise
            logger.info(f"OCI: Creating bucket {bucket_name}...")
            details = oci.object_storage.models.CreateBucketDetails(
                name=bucket_name,
                compartment_id=clients.compartment_id,
                public_access_type="NoPublicAccess",
            )
            await asyncio.to_thread(clients.storage.create_bucket, namespace, details)

    async def _submit_job(
        self, clients: OCIClients, namespace: str, object_name: str, output_prefix: str
    ) -> str:
        import oci

        oci_settings = self.config.oci
        models = oci.ai_speech.models
        details = models.CreateTranscriptionJobDetails(
            compartment_id=clients.compartment_id,
            display_name=f"Creole-Translation-{int(time.time() * 1000)}",
            input_location=models.ObjectListInlineInputLocation(
                location_type="OBJECT_LIST_INLINE_INPUT_LOCATION",
                object_locations=[
                    models.ObjectLocation(
                        namespace_name=namespace,
                        bucket_name=oci_settings.bucket_name,
                        object_names=[object_name],
                    )
                ],
            ),
            output_location=models.OutputLocation(
                namespace_name=namespace,
                bucket_name=oci_settings.bucket_name,
                prefix=output_prefix,
            ),
            model_details=models.TranscriptionModelDetails(
                domain=oci_settings.domain,
                language_code=oci_settings.language_code,
            ),
        )
        response = await asyncio.to_thread(clients.speech.create_transcription_job, details)
        return response.data.id

    def _poller(self, clients: OCIClients) -> JobPoller:
        async def fetch_status(job_id: str) -> JobStatus:
            response = await asyncio.to_thread(clients.speech.get_transcription_job, job_id)
            job = response.data
            return JobStatus(
                job_id=job_id,
                state=map_lifecycle_state(job.lifecycle_state),
                detail=getattr(job, "lifecycle_details", None),
                raw=job,
            )

        return JobPoller(
            self.name,
            fetch_status,
            interval=self.config.oci.poll_interval,
            timeout=self.config.oci.max_wait,
            clock=self._clock,
            sleep=self._sleep,
        )

    async def _list_output(self, clients: OCIClients, namespace: str, bucket_name: str, prefix: str) -> List[str]:
        response = await asyncio.to_thread(
            clients.storage.list_objects, namespace, bucket_name, prefix=prefix
        )
        return [obj.name for obj in (response.data.objects or [])]

    async def _read_transcript(
        self, clients: OCIClients, namespace: str, bucket_name: str, object_names: List[str]
    ) -> str:
        if not object_names:
            raise ProviderError(self.name, "No output files found")
        json_name = next((name for name in object_names if name.endswith(".json")), None)
        if json_name is None:
            raise ProviderError(self.name, "No JSON output file found")

        logger.info(f"OCI: Reading transcription result: {json_name}")
        response = await asyncio.to_thread(clients.storage.get_object, namespace, bucket_name, json_name)
        try:
            payload = json.loads(response.data.content)
        except (TypeError, ValueError) as e:
            raise ProviderError(self.name, f"Failed to parse transcription output: {e}") from e
        return text_from_oci_speech_output(payload)

    async def _delete_objects(self, clients: OCIClients, namespace: str, object_names: List[str]) -> None:
        for object_name in object_names:
            try:
                await asyncio.to_thread(
                    clients.storage.delete_object, namespace, self.config.oci.bucket_name, object_name
                )
            except Exception as e:
                logger.warning(f"OCI: Error deleting object {object_name}: {e}")

    async def transcribe(
        self,
        audio_path: Path,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        clients = self._request_clients(credentials, artifacts)
        namespace = await self._namespace(clients)
        bucket_name = self.config.oci.bucket_name
        await self._ensure_bucket(clients, namespace)

        stamp = int(time.time() * 1000)
        object_name = f"audio-{stamp}-{uuid.uuid4().hex[:8]}-{audio_path.name}"
        output_prefix = f"output-{stamp}-{uuid.uuid4().hex[:8]}"
        staged: List[str] = []
        output_listed = False

        try:
            logger.info("OCI: Uploading audio to Object Storage...")
            audio_bytes = await asyncio.to_thread(audio_path.read_bytes)
            await asyncio.to_thread(
                clients.storage.put_object, namespace, bucket_name, object_name, audio_bytes
            )
            staged.append(object_name)

            logger.info("OCI: Creating transcription job...")
            job_id = await self._submit_job(clients, namespace, object_name, output_prefix)

            logger.info("OCI: Waiting for transcription to complete...")
            status = await self._poller(clients).wait(job_id)

            output_location = getattr(status.raw, "output_location", None)
            prefix = getattr(output_location, "prefix", None) or output_prefix
            output_bucket = getattr(output_location, "bucket_name", None) or bucket_name

            output_objects = await self._list_output(clients, namespace, output_bucket, prefix)
            output_listed = True
            staged.extend(output_objects)
            return await self._read_transcript(clients, namespace, output_bucket, output_objects)
        finally:
            logger.info("OCI: Cleaning up...")
            if staged and not output_listed:
                # Failed or timed-out job: remove whatever output it left behind
                try:
                    staged.extend(await self._list_output(clients, namespace, bucket_name, output_prefix))
                except Exception as e:
                    logger.warning(f"OCI: Error listing job output for cleanup: {e}")
            await self._delete_objects(clients, namespace, staged)

    async def translate(
        self,
        text: str,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        import oci

        clients = self._request_clients(credentials, artifacts)
        models = oci.ai_language.models
        details = models.BatchLanguageTranslationDetails(
            compartment_id=clients.compartment_id,
            target_language_code="en",
            documents=[
                models.TextDocument(
                    key="doc1",
                    text=text,
                    language_code=self.config.oci.translation_source,
                )
            ],
        )
        response = await asyncio.to_thread(clients.language.batch_language_translation, details)
        documents = response.data.documents or []
        return documents[0].translated_text if documents else None

    def note(self) -> Optional[str]:
        return SUBSTITUTION_NOTE

    def models(self) -> Optional[Dict[str, str]]:
        return {
            "transcription": f"OCI AI Speech ({self.config.oci.language_code}, {self.config.oci.domain})",
            "translation": "OCI AI Language batch translation",
        }
