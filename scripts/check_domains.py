"""
Stream a batch of domains through a running Contact Finder server.

    python scripts/check_domains.py a.com b.com --server http://localhost:3000
    python scripts/check_domains.py -f domains.txt

Ctrl+C sends /cancel for the job before exiting.
"""
import argparse
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.features.contact_finder.client.stream_client import ContactFinderClient  # noqa: E402


def read_domains(args) -> list:
    domains = list(args.domains)
    if args.file:
        domains += Path(args.file).read_text(encoding="utf-8").splitlines()
    return [d.strip() for d in domains if d.strip()]


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("domains", nargs="*")
    parser.add_argument("-f", "--file", help="file with one domain per line")
    parser.add_argument("--server", default="http://localhost:3000")
    parser.add_argument("--job-id", default=None)
    args = parser.parse_args()

    domains = read_domains(args)
    if not domains:
        parser.error("no domains given")

    job_id = args.job_id or f"cli-{int(time.time() * 1000)}"
    client = ContactFinderClient(args.server)

    done = 0
    try:
        for result in client.check(domains, job_id):
            done += 1
            if result.error:
                print(f"[{done}/{len(domains)}] {result.site}  ERROR: {result.error}")
            elif result.emails:
                print(f"[{done}/{len(domains)}] {result.site}  {', '.join(result.emails)}")
            else:
                print(f"[{done}/{len(domains)}] {result.site}  no emails found")
    except KeyboardInterrupt:
        cancelled = client.cancel(job_id)
        print(f"\nJob {job_id} {'cancelled' if cancelled else 'already finished'}")
        return 130

    print(f"✅ {done} site(s) checked")
    return 0


if __name__ == "__main__":
    sys.exit(main())
