"""Assets API: file uploads on S3 with metadata in DynamoDB."""
