import time
import uuid

import soulbounds

TRADER = "0x" + "3c44cdddb6a900fa2b585dd299e03d12fa4293bc"


def main() -> None:
    client = soulbounds.run(port=57793)

    client.allow_metadata_key("tweets")
    client.allow_metadata_key("likes")

    trader = client.mint(TRADER, str(uuid.uuid4()), "https://example.org/sbt/trader")
    trader.set_metadata("tweets", "10").set_metadata("likes", "100")

    time.sleep(1.0)
    trader.set_metadata("tweets", "15")

    print(trader.identity, trader.url)
    for key, value in trader.metadata().items():
        print(f"  {key} = {value.decode('utf-8')}")

    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
