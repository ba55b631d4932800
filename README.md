# sensorhub

`sensorhub` provides the building blocks for both ends of a small sensor
pipeline:

* a **collector** that produces random sensor readings at a configurable rate
  and passes them to a sender. It has a Flask API for checking and changing
  the rate.
* a **store** that takes in readings and keeps them in a MySQL database. It
  serves them through a Flask API with lookup, filtering, pagination, update
  and deletion.

## Collector side

```python
import threading

from sensorhub.generator import SensorGenerator, load_config
from sensorhub.collector_api import create_app
from sensorhub.pump import generate_and_send

config = load_config()
generator = SensorGenerator(config.sensor_config)

reading = generator.generate()
```

`load_config()` returns an `AppConfig` with these defaults:

| Field              | Default           |
|--------------------|-------------------|
| `server_port`      | `"8090"`          |
| `grpc_server_addr` | `"127.0.0.1:50051"` |
| `sensor_config`    | a `SensorConfig`  |

The `SensorConfig` defaults are:

| Field             | Default                       |
|-------------------|-------------------------------|
| `sensor_type`     | `"temperature"`               |
| `min_value`       | `0.0`                         |
| `max_value`       | `100.0`                       |
| `generation_rate` | `timedelta(milliseconds=1000)` |

`SensorGenerator.generate()` returns a `SensorReading` with these fields:

| Field          | Value                                          |
|----------------|------------------------------------------------|
| `sensor_value` | a random float between `min_value` and `max_value` |
| `sensor_type`  | the configured type                            |
| `id1`          | one random capital letter                      |
| `id2`          | a random integer from 0 to 99                  |
| `timestamp`    | the current time in milliseconds               |

`generator.generation_rate` is a property that can be both read and set. It
takes a `timedelta` and is safe to use from more than one thread.
`generator.sensor_type` can only be read.

### Sending readings

`generate_and_send(generator, sender, stop_event)` runs a loop until
`stop_event`, a `threading.Event`, is set. Each pass of the loop:

1. generates a reading;
2. calls `sender.send_sensor_data(reading)`;
3. waits for the generator's current rate, ending the wait early if
   `stop_event` is set.

If the sender raises an exception, it is logged and the loop goes on. The
`sender` is normally a subclass of the abstract `SensorSender` class, which
declares `send_sensor_data(reading)` and `close()`.

```python
stop = threading.Event()
worker = threading.Thread(target=generate_and_send, args=(generator, my_sender, stop))
worker.start()
...
stop.set()
```

### Collector API

`create_app(generator)` in `sensorhub.collector_api` returns a Flask app with
these routes:

| Method | Path                | Response                                                        |
|--------|---------------------|-----------------------------------------------------------------|
| GET    | `/health`           | `{"status": "ok", "type": <sensor type>}`                       |
| GET    | `/config`           | `{"sensor_type": ..., "generation_rate_ms": ...}`               |
| POST   | `/config/frequency` | body `{"interval_ms": N}`. `N` must be at least 100, otherwise 400 |

A body that is not valid JSON, or has no JSON content type, is answered with
400 `"Invalid request format"`.

```python
app = create_app(generator)
app.run(port=8090)
```

## Store side

```python
from sensorhub.records import SensorDataService
from sensorhub.repository import MySQLSensorRepository
from sensorhub.ingest import SensorIngestor
from sensorhub.store_api import create_app

repo = MySQLSensorRepository(connection)   # an open DB-API connection using %s placeholders
service = SensorDataService(repo)

ingestor = SensorIngestor(service)
response = ingestor.receive(reading)       # IngestResponse(success=True, message=...)

app = create_app(service)
app.run(port=8080)
```

### Storage

`MySQLSensorRepository` reads and writes two tables:

* `sensor_data`, with columns `id`, `sensor_value`, `sensor_type_id`, `id1`,
  `id2` and `created_at`;
* `sensor_types`, with columns `id` and `name`.

Write operations commit when they succeed and roll back when they fail. A
record is inserted only when its sensor type matches a `name` in
`sensor_types`. Filtered queries return the newest records first, ordered by
`created_at`.

`build_where_clause(filter)` turns the fields that are set on a
`SensorRecordFilter` into a `WHERE` clause and a list of parameters. It can be
used on its own.

### Service

`SensorDataService` wraps any `SensorRecordRepository`.

Before it queries the repository, `get_by_filter` normalises the paging
values on the filter:

* a page that is 0 or less becomes `1`;
* a page size that is 0 or less becomes `10`;
* a page size above `100` becomes `100`.

### Ingestion

`SensorIngestor` turns readings into records, with `created_at` set to the
time of receipt, and stores them through the service.

* `receive(reading)` logs any storage error and raises it again.
* `receive_stream(readings)` skips readings that fail to store and returns
  the number it did store.

### Store API

`create_app(service)` in `sensorhub.store_api` returns a Flask app with these
routes:

| Method | Path                    | Behaviour                                                       |
|--------|-------------------------|-----------------------------------------------------------------|
| GET    | `/health`               | `{"status": "ok"}`                                              |
| GET    | `/api/sensor-data/<id>` | one record, or 404 if there is none                             |
| GET    | `/api/sensor-data`      | a filtered, paginated list of records                           |
| PUT    | `/api/sensor-data/<id>` | body `{"sensor_value": X}`; 404 if the record does not exist    |
| DELETE | `/api/sensor-data/<id>` | deletes one record                                              |
| DELETE | `/api/sensor-data`      | deletes every record matching a JSON filter and returns `deleted_rows` |

For PUT, if the body is empty or has no `sensor_value`, the value is set to
`0`.

The list endpoint accepts these query parameters:

* `id1`
* `id2`
* `sensor_type`
* `start_time` (RFC 3339)
* `end_time` (RFC 3339)
* `page`
* `page_size`

If `id2` or one of the times is malformed, the response is 400 with the parse
error. Malformed paging values fall back to the defaults.

The list response holds:

* `data`, which is `null` when the page is empty;
* `total`;
* `page`;
* `page_size`;
* `total_pages`.

The body for delete-by-filter takes the same filter fields, without the
paging ones.

`parse_filter(params)` and `parse_filter_body(payload)` build a
`SensorRecordFilter` from a mapping of query parameters or from a decoded
JSON body. Both raise `ValueError` on bad input.

`sensorhub.records` also defines `User` and `APIKey` data classes.

## What the package does not do

* **Network transport.** No `SensorSender` implementation is included, so the
  collector cannot deliver readings over the network. Readings reach the store
  only by calling `SensorIngestor` directly.
* **Commands.** There is no command-line entry point. The Flask apps and the
  sending loop are started from your own code.
* **Database connections.** The package does not open connections, create
  tables or manage a connection pool. `MySQLSensorRepository` needs an
  existing connection.
* **Authentication.** The `User` and `APIKey` classes are data holders only.
  Neither API requires credentials.