import csv
import json
from io import StringIO
from itertools import chain

IDENTITY_COLUMNS = ['id', 'submittedAt', 'name', 'email', 'phone']
LIST_SEPARATOR = '; '


def format_cell(value):
	if value is None:
		return ''
	if isinstance(value, bool):
		return 'true' if value else 'false'
	if isinstance(value, (list, tuple)):
		return LIST_SEPARATOR.join(format_cell(item) for item in value)
	if isinstance(value, dict):
		return json.dumps(value, ensure_ascii=False)
	return str(value)


def export_header(rows):
	"""Identity columns, then every answer key in the order first seen."""
	header = list(IDENTITY_COLUMNS)
	seen = set(header)
	for row in rows:
		for key in row['answers']:
			if key not in seen:
				seen.add(key)
				header.append(key)
	return header


def export_values(row, header):
	values = []
	for column in header:
		if column in IDENTITY_COLUMNS:
			values.append(format_cell(row.get(column)))
		else:
			values.append(format_cell(row['answers'].get(column)))
	return values


def csv_lines(rows, header=None):
	"""Yield the CSV text line by line, every field quoted."""
	rows = list(rows)
	header = header or export_header(rows)
	buffer = StringIO()
	writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
	for values in chain([header], (export_values(row, header) for row in rows)):
		writer.writerow(values)
		yield buffer.getvalue()
		buffer.seek(0)
		buffer.truncate(0)


def write_csv(rows, handle):
	for line in csv_lines(rows):
		handle.write(line)
