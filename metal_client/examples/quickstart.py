import asyncio
import io

from metal_client import ClientConfig, InMemoryFile, Metal, configure_logging, models as M

configure_logging("DEBUG")

# METAL_API_KEY / METAL_CLIENT_ID / METAL_INDEX_ID from the environment or .env
cfg = ClientConfig.from_env()
cli = Metal(cfg)


async def main():
    # 1) index a couple of documents
    await cli.index(M.IndexInput(text="Approximate nearest neighbors trade recall for speed.", metadata={"tag": "ann"}))
    await cli.index(M.IndexInput(text="Vector databases enable efficient similarity search."))

    # 2) search
    hits = await cli.search(M.SearchInput(text="nearest neighbors", limit=3))
    print("Hits:", hits)

    # 3) upload a CSV held in memory, then one from an open file handle
    csv = InMemoryFile(name="scores.csv", content=b"id,score\n1,0.9\n2,0.4\n")
    print("Upload:", await cli.upload_file(csv))

    fh = io.BytesIO(b"id,score\n3,0.1\n")
    fh.name = "more scores.csv"
    print("Upload:", await cli.upload_file(fh))


asyncio.run(main())
