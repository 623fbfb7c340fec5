"""SQL functions: arithmetic, logic, strings, arrays, codecs, time and debugging."""