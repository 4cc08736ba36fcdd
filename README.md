# piscine

A collection of small command-line tools and library functions:
descriptive statistics, recipe database conversion and diffing, filesystem
snapshot diffing, `find`/`wc`/`xargs`-style utilities, log rotation, a candy
vending service over HTTP(S), a paginated places search application backed by
Elasticsearch, concurrency helpers, a concurrent page fetcher, a streaming
anomaly detector and a logo drawer.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Command-line tools

Every command accepts `--help` for its full list of options.

| Command | What it does |
| --- | --- |
| `piscine-stats` | Reads integers from standard input, one per line, up to the first empty line, and prints mean, median, mode and sample standard deviation. Flags `-mean`, `-median`, `-mode`, `-sd` select what is printed; with none, all four are. Values must lie between -100000 and 100000. |
| `piscine-readdb -f FILE` | Reads a recipe database in `.json` or `.xml` and prints it converted to the other format. |
| `piscine-comparedb -old OLD.xml -new NEW.json` | Compares an original XML recipe database with a new JSON one and reports added, removed and changed cakes and ingredients. |
| `piscine-comparefs -old OLD -new NEW` | Compares two snapshot files (one path per line) and prints sorted `ADDED` and `REMOVED` paths. |
| `piscine-find [-f] [-d] [-sl] [-ext EXT] DIR` | Walks a directory without following links and prints files, directories (with a trailing `/`) or symbolic links (with their target, or `[broken]`). |
| `piscine-wc [-l] [-m] [-w] FILE...` | Counts lines, bytes or words (words by default) in each file. |
| `piscine-rotate -a ARCHIVE_DIR FILE...` | Gzips each file into `ARCHIVE_DIR/<name>_<mtime>.tar.gz` and removes the original. |
| `piscine-xargs COMMAND [ARGS...]` | Runs a command with the lines of standard input appended as arguments and prints its output. |
| `piscine-cow [WORDS...]` | Prints a cow saying the given words, or "Thank you!". |
| `piscine-candy-server` | Serves `/buy_candy`; TLS with `--cert`/`--key` (default `localhost/cert.pem`, `localhost/key.pem`), port 443 by default; `--cowsay` thanks buyers with a cow. |
| `piscine-candy-client -k TYPE -c COUNT -m MONEY` | Posts an order to the vending server (`--url`, CA file `--ca`, default `minica.pem`) and prints the result. |
| `piscine-places-load` | Creates the `places` index if needed, loads a tab-separated file (`--data`, default `data.csv`) into it, then serves a plain HTML list of places on port 8888. |
| `piscine-places` | Serves the places web application on port 8888: an HTML list at `/`, `/api/places`, `/api/get_token` and `/api/recommend`, which needs a bearer token unless `--no-auth` is given. Tokens are signed with `--secret`. |
| `piscine-sleepsort [NUMBERS...]` | Sleep-sorts the numbers (`--unit` seconds per unit); `--multiplex` merges sample streams instead. |
| `piscine-crawl [URLS...]` | Fetches pages concurrently (`--workers`, `--timeout`) and prints the first 500 characters of each body; stops cleanly on interrupt. |
| `piscine-anomalies -k COEFFICIENT` | Generates a stream of frequencies, learns their mean and deviation from the first 50, then prints readings that deviate more than `k` deviations. `--interval`, `--limit`, `--seed` and `--output` (JSON lines) control it. |
| `piscine-logo` | Draws the logo to `amazing_logo.png` (`--output` to change). |

Some examples:

```
printf '1\n2\n2\n5\n' | piscine-stats
piscine-comparefs --help
piscine-wc --help
ls | piscine-xargs echo
```

## Library use

```python
from piscine.mincoins import min_coins2
from piscine.presents import Present, grab_presents, n_coolest_presents
from piscine.trees import TreeNode, are_toys_balanced, unroll_garland
from piscine.stats import mean, median, mode, standard_deviation

min_coins2(13, [1, 5, 10])          # [10, 1, 1, 1]
grab_presents(14, [Present(3, 5), Present(5, 10), Present(4, 6), Present(2, 5)])
```

- `piscine.stats` — `read_numbers`, `mean`, `median`, `mode`, `standard_deviation`.
- `piscine.mincoins` — greedy coin change (`min_coins`, `min_coins2`).
- `piscine.trees` — `TreeNode`, `count_toys`, `are_toys_balanced`, `unroll_garland`.
- `piscine.presents` — `Present`, `n_coolest_presents`, `grab_presents` (0/1 knapsack).
- `piscine.elements` — bounds-checked `get_element`.
- `piscine.plants` — `describe_plant` over dataclass records.
- `piscine.recipes` — `read_json`, `read_xml`, `read_database`, `to_json`, `to_xml`, `compare_recipes`, `compare_databases`.
- `piscine.snapshots` — `compare_snapshots`, `compare_filesystems`.
- `piscine.find` — `find_entries`.
- `piscine.wc` — `count`, `count_file`.
- `piscine.rotate` — `rotate_file`.
- `piscine.xargs` — `run`.
- `piscine.cow` — `ask_cow`.
- `piscine.candy` — `Order`, `parse_order`, `buy_candy`, `PurchaseError`.
- `piscine.candy_server` — `make_server`, `CandyHandler`.
- `piscine.candy_client` — `send_order`, `format_response`.
- `piscine.places_store` — `Place`, `ElasticsearchStore`, `load_csv`, `build_bulk_body`.
- `piscine.places_app` — the WSGI application `PlacesApp`, `render_page`, `issue_token`, `validate_token`.
- `piscine.channels` — `sleep_sort` and `multiplex` over iterables.
- `piscine.crawler` — `page_parser`, `crawl_web`.
- `piscine.anomalies` — `AnomalyDetector`, `stream_data`.
- `piscine.logo` — `draw_logo`.

## Candy prices

| Code | Price |
| --- | --- |
| CE | 10 |
| AA | 15 |
| NT | 17 |
| DE | 21 |
| YR | 23 |

## What the package does not do

- The places commands need a running Elasticsearch server; nothing is stored locally.
- `piscine-anomalies` generates its readings in-process rather than receiving
  them over the network, and keeps anomalies only in an optional JSON-lines
  file, not in a database.
- There is no blog or admin web application, and no replicated key-value store.